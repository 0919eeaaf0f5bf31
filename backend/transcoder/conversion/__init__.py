from .models import ConversionRequest, EngineInvocation, PipelinePlan, TaskResult
from .service import ConversionService, ConversionTask

__all__ = [
    "ConversionRequest",
    "ConversionService",
    "ConversionTask",
    "EngineInvocation",
    "PipelinePlan",
    "TaskResult",
]
