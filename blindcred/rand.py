""" Sources of random scalars.

Every random scalar in blindcred (ElGamal randomness, commitment openings,
proof blinding factors, rerandomization exponents) comes from a source
object held in the system parameters. Production code uses
``OpenSSLSource``; tests may use ``SeededSource`` to get reproducible runs.

Example:
    >>> from petlib.bn import Bn
    >>> o = Bn(1000003)
    >>> x = OpenSSLSource().scalar(o)
    >>> 0 <= x < o
    True
    >>> SeededSource(7).scalar(o) == SeededSource(7).scalar(o)
    True

"""

import random

from petlib.bn import Bn


class OpenSSLSource(object):
    """ Cryptographically strong scalars drawn with OpenSSL ``BN_rand_range``. """

    def scalar(self, o):
        """ Returns a uniform scalar 0 <= x < o. """
        return o.random()

    def nonzero_scalar(self, o):
        """ Returns a uniform scalar 0 < x < o. """
        return (o - 1).random() + 1


class SeededSource(object):
    """ A deterministic scalar source. Only for tests and reproducible runs. """

    def __init__(self, seed=0):
        self._rand = random.Random(seed)

    def scalar(self, o):
        """ Returns a scalar 0 <= x < o drawn from the seeded generator. """
        # 64 extra bits make the modular bias negligible
        n = self._rand.getrandbits(o.num_bits() + 64)
        return Bn.from_decimal(str(n)) % o

    def nonzero_scalar(self, o):
        """ Returns a scalar 0 < x < o drawn from the seeded generator. """
        return self.scalar(o - 1) + 1


# --- TESTS ---

def test_openssl_range():
    o = Bn(101)
    src = OpenSSLSource()
    for _ in range(200):
        assert 0 <= src.scalar(o) < o
        assert 0 < src.nonzero_scalar(o) < o

def test_seeded_repeatable():
    o = Bn.from_decimal("16798108731015832284940804142231733909759579603404752749028378864165570215949")
    s1, s2 = SeededSource(42), SeededSource(42)
    xs = [s1.scalar(o) for _ in range(5)]
    ys = [s2.scalar(o) for _ in range(5)]
    assert xs == ys
    assert len(set(x.int() for x in xs)) == 5

def test_seeded_range():
    o = Bn(7)
    src = SeededSource(1)
    for _ in range(100):
        assert 0 <= src.scalar(o) < o
        assert 0 < src.nonzero_scalar(o) < o
