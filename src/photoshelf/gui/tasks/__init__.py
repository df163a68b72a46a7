from .rotation_worker import RotationJob, RotationWorker, RotationWorkerSignals

__all__ = ["RotationJob", "RotationWorker", "RotationWorkerSignals"]
