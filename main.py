from time import sleep, perf_counter

from lazy import ArrayTransform
from utils import setup_logging


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.05)  # pretend this is expensive
    return x * x


def main(delay=True):
    setup_logging()
    transform = expensive_transform if delay else (lambda x: x * x)

    print("\n--- Demo: laziness (no work until a terminal call) ---")
    data = list(range(1, 11))
    pipeline = (
        ArrayTransform(data)
        .map(transform)             # expensive; watch when it runs
        .filter(lambda v: v % 2 == 0)
    )
    print(f"Constructed {pipeline!r}. Nothing computed yet.")

    t0 = perf_counter()
    out = pipeline.to_list()
    t1 = perf_counter()
    print(f"Result: {out}")
    print(f"Time: {t1 - t0:.2f}s\n")

    print("--- Demo: early termination with some() ---")
    found = ArrayTransform(data).map(transform).some(lambda v: v > 10)
    print(f"Any square above 10: {found} (stopped at the first match)\n")

    print("--- Demo: right to left reduction keeps source indices ---")
    trail = ArrayTransform(["a", "b", "c"]).reduce_right(
        lambda acc, el, i: acc + [f"{el}@{i}"], []
    )
    print(f"Visited: {trail}")
    return out


if __name__ == "__main__":
    main()
