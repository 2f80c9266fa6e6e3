from revpilot.modules.conflicts.detector import Conflict, ConflictDetector, ConflictKind

__all__ = ["Conflict", "ConflictDetector", "ConflictKind"]
