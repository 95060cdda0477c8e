"""pyguia - Position arbitration, address change detection and spoken announcements."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyguia")
except PackageNotFoundError:
    __version__ = "0+local"
from pyguia.bus import NotificationBus
from pyguia.config import GuiaConfig
from pyguia.exceptions import (
    GuiaConfigError,
    GuiaError,
    InvalidArgumentError,
    ObserverFailure,
    UnsupportedEnvironmentError,
)
from pyguia.models import (
    AddressField,
    AddressSnapshot,
    Position,
    PriorityRank,
    QueueItem,
    SpeechConfig,
    SpeechState,
    VoiceDescriptor,
    haversine_distance,
)
from pyguia.pipeline import GuiaPipeline
from pyguia.speech import (
    SpeechConfiguration,
    SpeechEngine,
    SpeechPlaybackController,
    SpeechPriorityQueue,
    UtteranceCallbacks,
    UtteranceConfig,
    VoiceResolver,
)
from pyguia.state.changes import ChangeDetector
from pyguia.state.events import (
    AddressChangeEvent,
    ChangeDetails,
    PositionEvent,
    PositionEventKind,
    RejectionReason,
    SpeechStatus,
)
from pyguia.state.policy import ArbiterDecision, evaluate
from pyguia.state.store import LocationStore

__all__ = [
    "__version__",
    "AddressChangeEvent",
    "AddressField",
    "AddressSnapshot",
    "ArbiterDecision",
    "ChangeDetails",
    "ChangeDetector",
    "GuiaConfig",
    "GuiaConfigError",
    "GuiaError",
    "GuiaPipeline",
    "InvalidArgumentError",
    "LocationStore",
    "NotificationBus",
    "ObserverFailure",
    "Position",
    "PositionEvent",
    "PositionEventKind",
    "PriorityRank",
    "QueueItem",
    "RejectionReason",
    "SpeechConfig",
    "SpeechConfiguration",
    "SpeechEngine",
    "SpeechPlaybackController",
    "SpeechPriorityQueue",
    "SpeechState",
    "SpeechStatus",
    "UnsupportedEnvironmentError",
    "UtteranceCallbacks",
    "UtteranceConfig",
    "VoiceDescriptor",
    "VoiceResolver",
    "evaluate",
    "haversine_distance",
]
