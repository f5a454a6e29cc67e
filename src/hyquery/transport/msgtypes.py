# Request types (echoed back at offset 8 of every reply)
TYPE_BASIC  = 0x00
TYPE_FULL   = 0x01
