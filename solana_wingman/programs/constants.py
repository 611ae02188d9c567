"""
Program IDs and account layouts
"""

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

TOKEN_PROGRAMS = (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID)

# Base SPL mint account size (Token-2022 mints may be larger with extensions)
MINT_ACCOUNT_SIZE = 82

# System program instruction indices (u32 LE)
SYSTEM_IX_CREATE_ACCOUNT = 0
SYSTEM_IX_TRANSFER = 2

# SPL Token instruction tags (u8)
TOKEN_IX_TRANSFER_CHECKED = 12
TOKEN_IX_MINT_TO_CHECKED = 14
TOKEN_IX_INITIALIZE_MINT2 = 20

# Associated token program instruction tags
ATA_IX_CREATE_IDEMPOTENT = 1
