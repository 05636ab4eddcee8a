import csv
import logging
import os
import time
import tracemalloc

import psutil

logger = logging.getLogger(__name__)

FIELDNAMES = ["operation", "latency", "throughput", "memory_usage", "cpu_usage", "data_size_bytes"]


def measure_performance(func, *args, **kwargs):
    """Time one cipher call (encrypt or decrypt) and record its resource usage.

    Returns ``(result, metrics)``. ``metrics`` holds the latency in seconds, the
    throughput in bytes per second of the returned text, the tracemalloc
    current and peak memory, the CPU percent psutil reports for this process,
    and the size of the returned text.
    """
    process = psutil.Process(os.getpid())
    process.cpu_percent(interval=None)

    tracemalloc.start()
    start_time = time.perf_counter()
    try:
        result = func(*args, **kwargs)
    finally:
        end_time = time.perf_counter()
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    cpu_usage = process.cpu_percent(interval=None)

    data_size = len(result.encode()) if isinstance(result, str) else len(result) if result else 0
    elapsed_time = end_time - start_time
    throughput = data_size / elapsed_time if elapsed_time > 0 else 0

    metrics = {
        "latency": elapsed_time,
        "throughput": throughput,
        "memory_usage": {"current": current, "peak": peak},
        "cpu_usage": cpu_usage,
        "data_size_bytes": data_size,
    }

    logger.info("Performance Metrics (%s): %s", getattr(func, "__name__", func), metrics)
    return result, metrics


def save_metrics_to_csv(metrics, operation, csv_file):
    """Append one metrics row to a CSV file, writing the header on first use."""
    file_exists = os.path.isfile(csv_file)

    row = {
        "operation": operation,
        "latency": f"{metrics['latency']:.6f} s",
        "throughput": f"{metrics['throughput'] / 1024:.6f} KB/s",
        "memory_usage": str(metrics["memory_usage"]),
        "cpu_usage": f"{metrics['cpu_usage']:.2f} %",
        "data_size_bytes": metrics["data_size_bytes"],
    }

    with open(csv_file, mode="a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        if not file_exists:
            writer.writeheader()
        writer.writerow(row)
