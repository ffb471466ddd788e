"""pyoilfox - Async Python client and synchronizer for OilFox tank telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyoilfox")
except PackageNotFoundError:
    __version__ = "0+local"
from pyoilfox._constants import InstanceStatus, SchemaVersion
from pyoilfox.client import OilFoxClient
from pyoilfox.config import Credentials, OilFoxConfig
from pyoilfox.driver import SyncHandle, run_once, start, stop
from pyoilfox.exceptions import (
    OilFoxAuthenticationError,
    OilFoxConfigError,
    OilFoxConnectionError,
    OilFoxError,
    OilFoxFormatError,
    OilFoxSinkError,
    OilFoxTransportError,
)
from pyoilfox.models import AuthToken, DeviceRecord, ProfileKind, VariableProfile
from pyoilfox.session import SessionManager
from pyoilfox.state.reconcile import Reconciler, ReconcileResult
from pyoilfox.state.status import StatusRecorder
from pyoilfox.state.store import JsonFileNamedValueStore, NamedValueStore
from pyoilfox.state.tokens import FileTokenStore, MemoryTokenStore
from pyoilfox.sync import CycleOutcome, CycleResult, CycleStage, SyncEngine

__all__ = [
    "__version__",
    "AuthToken",
    "Credentials",
    "CycleOutcome",
    "CycleResult",
    "CycleStage",
    "DeviceRecord",
    "FileTokenStore",
    "InstanceStatus",
    "JsonFileNamedValueStore",
    "MemoryTokenStore",
    "NamedValueStore",
    "OilFoxAuthenticationError",
    "OilFoxClient",
    "OilFoxConfig",
    "OilFoxConfigError",
    "OilFoxConnectionError",
    "OilFoxError",
    "OilFoxFormatError",
    "OilFoxSinkError",
    "OilFoxTransportError",
    "ProfileKind",
    "ReconcileResult",
    "Reconciler",
    "SchemaVersion",
    "SessionManager",
    "StatusRecorder",
    "SyncEngine",
    "SyncHandle",
    "VariableProfile",
    "run_once",
    "start",
    "stop",
]
