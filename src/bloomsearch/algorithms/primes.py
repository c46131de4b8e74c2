def is_prime(n: int) -> bool:
    """Trial division over candidates of the form 6k-1 and 6k+1"""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def next_prime(n: int) -> int:
    """Smallest prime strictly greater than ``n``"""
    m = n + 1
    while not is_prime(m):
        m += 1
    return m
