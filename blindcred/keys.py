""" Key generation for issuing authorities and credential holders.

An authority signs with two secret scalars ``(x, y)`` and publishes
``(x * g2, y * g2)``. A holder keeps an ElGamal key ``d`` and publishes
``d * g1``.

Example:
    >>> from blindcred.params import setup
    >>> params = setup()
    >>> kp = keygen(params, 40, 42)
    >>> kp.vk == verification_key(params, kp.sk)
    True

"""

from collections import namedtuple

from .errors import MalformedInput
from .params import to_scalar

SigningKey = namedtuple("SigningKey", ["x", "y"])
VerificationKey = namedtuple("VerificationKey", ["X", "Y"])
AuthorityKeyPair = namedtuple("AuthorityKeyPair", ["sk", "vk"])
ElGamalKeyPair = namedtuple("ElGamalKeyPair", ["priv", "pub"])


def _secret(params, value):
    """ Draws a random secret, or checks a given one. Zero is never a valid secret. """
    if value is None:
        return params.rng.nonzero_scalar(params.o)
    value = to_scalar(params, value)
    if value == 0:
        raise MalformedInput("Secret key cannot be zero.")
    return value


def keygen(params, x=None, y=None):
    """ Generates an authority key pair, drawing any missing secret at random. """
    x = _secret(params, x)
    y = _secret(params, y)
    sk = SigningKey(x, y)
    return AuthorityKeyPair(sk, verification_key(params, sk))


def verification_key(params, sk):
    """ Derives the public verification key of a signing key. """
    g2 = params.g2
    return VerificationKey(sk.x * g2, sk.y * g2)


def elgamal_keygen(params, d=None):
    """ Generates a holder ElGamal key pair ``(d, d * g1)``. """
    d = _secret(params, d)
    return ElGamalKeyPair(d, d * params.g1)


# --- TESTS ---

import pytest
from petlib.bn import Bn

from .params import setup
from .rand import SeededSource

def test_keygen_explicit():
    params = setup()
    kp = keygen(params, 40, 42)
    assert kp.sk == SigningKey(Bn(40), Bn(42))
    assert kp.vk.X == params.g2 * 40
    assert kp.vk.Y == params.g2 * 42

def test_keygen_rederive():
    params = setup()
    kp = keygen(params)
    vk = verification_key(params, kp.sk)
    assert vk.X.export() == kp.vk.X.export()
    assert vk.Y.export() == kp.vk.Y.export()

def test_keygen_random():
    params = setup()
    kp1, kp2 = keygen(params), keygen(params)
    assert kp1.sk.x != kp2.sk.x
    assert kp1.vk.X != kp2.vk.X

def test_keygen_seeded():
    p1 = setup(rng=SeededSource(3))
    p2 = setup(rng=SeededSource(3))
    assert keygen(p1).sk == keygen(p2).sk

def test_keygen_malformed():
    params = setup()
    with pytest.raises(MalformedInput):
        keygen(params, -1, 42)
    with pytest.raises(MalformedInput):
        keygen(params, 40, params.o)

def test_elgamal_keygen():
    params = setup()
    kp = elgamal_keygen(params, 90)
    assert kp.priv == Bn(90)
    assert kp.pub == params.g1 * 90

    kp = elgamal_keygen(params)
    assert kp.pub == kp.priv * params.g1

    with pytest.raises(MalformedInput):
        elgamal_keygen(params, "90")

def test_zero_secrets():
    params = setup()
    with pytest.raises(MalformedInput):
        keygen(params, 0, 42)
    with pytest.raises(MalformedInput):
        keygen(params, 40, 0)
    with pytest.raises(MalformedInput):
        elgamal_keygen(params, 0)

def test_random_secrets_nonzero():
    class ZeroFirst(SeededSource):
        def scalar(self, o):
            return Bn(0)

    params = setup(rng=ZeroFirst(1))
    kp = keygen(params)
    assert kp.sk.x != 0 and kp.sk.y != 0
    assert not elgamal_keygen(params).pub.isinf()
