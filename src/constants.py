"""
Global constants for Preordained Swapper.
Contains path configuration, archive file names and binary layout constants.
"""

import os

# **************************************************************** #
#                       Build Info                                     #
# **************************************************************** #
APP_VERSION = "dev"

# **************************************************************** #
#                       Environment Detection                        #
# **************************************************************** #
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))

# **************************************************************** #
#                       Path Configuration                           #
# **************************************************************** #
if DEV_MODE:
    TEMP_LOG_DIR = os.path.join(SCRIPT_DIR, "..", "workdir")
    CONFIG_FILE = os.path.join(SCRIPT_DIR, "..", "workdir", "config.json")
else:
    TEMP_LOG_DIR = SCRIPT_DIR
    CONFIG_FILE = os.path.join(SCRIPT_DIR, "config.json")

os.makedirs(TEMP_LOG_DIR, exist_ok=True)

# Where the game keeps its modding tools when installed through Steam.
STEAM_MODDING_DIR = os.path.join(
    os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)"),
    "Steam",
    "steamapps",
    "common",
    "Kingdoms of Amalur Re-Reckoning",
    "modding",
)

# **************************************************************** #
#                       Game Archive Files                           #
# **************************************************************** #
PATCH_PAK = "patch_0.pak"
INITIAL_PAK = "initial_0.pak"
BACKUP_ZIP = "patch_0_po.zip"

UNPACKER_EXE = "pakfileunpacker.exe"
BUILDER_EXE = "pakfilebuilder.exe"

SIMTYPE_BATCH = "134225858_ksmt.batch"
SIMTYPE_TABLE = "symbol_table_simtype.bin"
FAB_TABLE = "symbol_table_fab.bin"
FABSLOT_TABLE = "symbol_table_fabslot.bin"

BUNDLE_EXTENSION = ".bundle"

# **************************************************************** #
#                       Armor Sets                                   #
# **************************************************************** #
MAGE_PREFIX = "mit_mage_common06"
ROGUE_PREFIX = "mit_rogue_common06"
WARRIOR_PREFIX = "mit_warrior_common07"

# Match order matters: first prefix that fits wins
ARMOR_PREFIXES = (MAGE_PREFIX, ROGUE_PREFIX, WARRIOR_PREFIX)

HELMET_CATEGORY = "head"
HELMET_FAB_SLOT = "HairAndHelmet"
