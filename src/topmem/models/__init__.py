from topmem.models.process_sample import ProcessSample, LogRecord
from topmem.models.run_config import RunConfig

__all__ = ["ProcessSample", "LogRecord", "RunConfig"]
