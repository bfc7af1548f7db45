import time
import asyncio
from functools import wraps
from utils.logging import get_logger

def time_it(service_name: str):
    """
    A decorator to log the execution time of a function.
    Works with both sync and async functions.
    """
    def decorator(func):
        if asyncio.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                logger = get_logger(service_name)
                start_time = time.perf_counter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    duration = time.perf_counter() - start_time
                    logger.info(f"Finished {service_name} in {duration:.3f}s")
            return async_wrapper
        else:
            @wraps(func)
            def sync_wrapper(*args, **kwargs):
                logger = get_logger(service_name)
                start_time = time.perf_counter()
                try:
                    return func(*args, **kwargs)
                finally:
                    duration = time.perf_counter() - start_time
                    logger.info(f"Finished {service_name} in {duration:.3f}s")
            return sync_wrapper
    return decorator
