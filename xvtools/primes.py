"""A pipeline of sieve stages, each passing on numbers its prime does not divide."""

import sys

FIRST = 2
LAST = 35
STAGES = 3


def _without_multiples(prime, numbers):
    for number in numbers:
        if number % prime:
            yield number


def primes(numbers, stages=STAGES):
    """Yield the first number reaching each of at most *stages* sieve stages."""
    stream = iter(numbers)
    for _ in range(stages):
        prime = next(stream, None)
        if prime is None:
            return
        yield prime
        stream = _without_multiples(prime, stream)


def main(argv=None):
    for prime in primes(range(FIRST, LAST + 1), STAGES):
        print(f"prime {prime}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())