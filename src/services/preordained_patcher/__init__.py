from .errors import (  # noqa: F401
    PreordainedError,
    DecodeError,
    ResolutionError,
    MarkerNotFoundError,
    BackupError,
)
from .models import (  # noqa: F401
    SymbolEntry,
    BatchEntry,
    SymbolMaps,
    PatchedEntry,
    PatchResult,
    RunContext,
    RunSummary,
)
from .symbol_table import (  # noqa: F401
    decode_symbol_table,
    encode_symbol_table,
    build_symbol_maps,
    load_symbol_maps,
)
from .fab_resolver import resolve_fab_ids  # noqa: F401
from .bundle_writer import build_bundle, write_bundle  # noqa: F401
from .simtype_patcher import patch_simtype_batch, patch_simtype_batch_file  # noqa: F401
from .pak_tools import PakTools, ExecutablePakTools, PakToolError  # noqa: F401
from .backup import backup_or_restore  # noqa: F401
from .patcher import PreordainedPatcher, scratch_directory  # noqa: F401
