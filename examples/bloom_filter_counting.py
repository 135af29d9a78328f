"""
Counting Bloom Filter Demo for bloomcount.

This example walks through inserting, checking and deleting items, shows which
counters each operation touches, and provokes a false positive on a small
filter.
"""

import logging
import random

from bloomcount import BloomSimulation, CountingBloomFilter


def render_counters(cbf):
    """Render the counter array as one line, highlighting non-zero slots."""
    return " ".join(f"{value:>2}" if value else " ." for value in cbf.counters)


def demonstrate_operations():
    """Insert, check and delete a handful of words."""
    print("\n=== Counting Bloom Filter Operations ===")

    cbf = CountingBloomFilter(capacity=20, hash_count=3)
    print(f"Filter parameters: m={cbf.capacity}, k={cbf.hash_count}")

    print("\nInserting words...")
    for word in ["alpha", "beta", "banana", "y"]:
        record = cbf.insert(word)
        print(f"  insert {word!r:10} -> indices {list(record.indices)}")
    print(f"  counters: {render_counters(cbf)}")

    print("\nChecking membership:")
    for word in ["alpha", "gamma", "never-inserted", "a"]:
        record = cbf.check(word)
        verdict = "possibly present" if record.matched else "definitely absent"
        if record.false_positive:
            verdict += " (false positive)"
        print(f"  check {word!r:16} -> {verdict}, missing {list(record.missing_indices)}")

    print("\nDeleting 'banana' (shares slot 19 with 'y')...")
    cbf.delete("banana")
    print(f"  counters: {render_counters(cbf)}")
    print(f"  'y' still matches: {cbf.check('y').matched}")


def demonstrate_false_positives():
    """Fill a small filter and compare measured and estimated FP rates."""
    print("\n=== False Positive Rate ===")

    rng = random.Random(42)
    cbf = CountingBloomFilter(capacity=200, hash_count=4)

    for i in range(40):
        cbf.insert(f"member-{i}")

    probes = [f"probe-{rng.getrandbits(32)}" for _ in range(2000)]
    false_positives = sum(1 for probe in probes if cbf.check(probe).false_positive)

    print(f"  Members: {len(cbf)}, fill rate: {cbf.fill_rate:.1%}")
    print(f"  Measured FP rate:  {false_positives / len(probes):.4f}")
    print(f"  Estimated FP rate: {cbf.estimated_false_positive_rate():.4f}")
    print(f"  Exact formula:     {cbf.estimated_false_positive_rate(exact=True):.4f}")


def demonstrate_simulation():
    """Drive the filter through the text-input front end."""
    print("\n=== Simulation Driver ===")

    sim = BloomSimulation()
    sim.insert("  hello ")
    sim.check("hello")
    sim.delete("ghost")  # logged as a warning, nothing changes
    sim.configure(capacity=40, hash_count=4)
    sim.insert("world")

    for key, value in sim.summary().items():
        print(f"  {key}: {value}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    demonstrate_operations()
    demonstrate_false_positives()
    demonstrate_simulation()


if __name__ == "__main__":
    main()
