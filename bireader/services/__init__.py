"""Services package initialization."""

from bireader.services.anchors import Anchor, AnchorRegistry
from bireader.services.dictionary import DictionaryEntry, GlossaryDictionary
from bireader.services.document_store import DocumentStore
from bireader.services.export import ExportFormat, ExportMode, ExportService
from bireader.services.history import HistoryService
from bireader.services.lookup import LookupController, LookupState
from bireader.services.navigation import NavigationController, ViewerState
from bireader.services.progress import ProgressState, TranslationProgress
from bireader.services.scheduler import TaskScheduler
from bireader.services.scroll_sync import ScrollSynchronizer
from bireader.services.session import ViewerSession
from bireader.services.split_resizer import SplitResizer
from bireader.services.translation import DemoTranslator

__all__ = [
    "Anchor",
    "AnchorRegistry",
    "DemoTranslator",
    "DictionaryEntry",
    "DocumentStore",
    "ExportFormat",
    "ExportMode",
    "ExportService",
    "GlossaryDictionary",
    "HistoryService",
    "LookupController",
    "LookupState",
    "NavigationController",
    "ProgressState",
    "ScrollSynchronizer",
    "SplitResizer",
    "TaskScheduler",
    "TranslationProgress",
    "ViewerSession",
    "ViewerState",
]
