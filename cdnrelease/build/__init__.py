from .builder import Builder, BuildResult, CommandBuilder
from .pipeline import BuildContext, BuildOrchestrator, Stage

__all__ = [
    "Builder",
    "BuildResult",
    "CommandBuilder",
    "BuildContext",
    "BuildOrchestrator",
    "Stage",
]
