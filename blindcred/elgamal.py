""" ElGamal encryption of scalars "in the exponent" over G1.

A scalar ``m`` is encrypted under a public key ``pub = d * g1`` as
``(a, b) = (k * g1, k * pub + m * base)``. Decryption recovers the point
``m * base``, not ``m`` itself. The base defaults to ``g1`` but may be any
fixed point; the blind signing protocol encrypts in the base ``h`` it
derives from the attribute commitment.

Example:
    >>> from blindcred.params import setup
    >>> from blindcred.keys import elgamal_keygen
    >>> params = setup()
    >>> priv, pub = elgamal_keygen(params)
    >>> a, b, k = elgamal_enc(params, pub, 5)
    >>> elgamal_dec(params, priv, a, b) == 5 * params.g1
    True

"""

from .params import to_scalar, check_g1


def elgamal_enc(params, pub, m, base=None):
    """ Encrypts the scalar m as ``m * base`` under the public key pub.

    Args:
        params (Params): the system parameters.
        pub (G1Elem): the holder's ElGamal public key.
        m (Bn): the scalar to encrypt.
        base (G1Elem): the encoding base, ``g1`` if None.

    Returns:
        G1Elem, G1Elem, Bn: the ciphertext ``(a, b)`` and the randomness ``k``,
        which the caller needs to prove things about the ciphertext.
    """
    (G, o, g1, g2, h, e, rng) = params
    check_g1(params, pub)
    m = to_scalar(params, m)
    if base is None:
        base = g1
    check_g1(params, base)

    k = rng.scalar(o)
    a = k * g1
    b = k * pub + m * base
    return (a, b, k)


def elgamal_dec(params, priv, a, b):
    """ Decrypts ``(a, b)`` into ``m * base``. A wrong key gives an unrelated point. """
    o = params.o
    return b + ((-priv) % o) * a


# --- TESTS ---

import pytest
from petlib.bn import Bn

from .errors import MalformedInput
from .keys import elgamal_keygen
from .params import setup
from .rand import SeededSource

def test_elgamal_roundtrip_base():
    params = setup()
    priv, pub = elgamal_keygen(params, 42)
    base = params.g1 * 999
    a, b, k = elgamal_enc(params, pub, 5, base)
    assert a == k * params.g1
    assert elgamal_dec(params, priv, a, b) == base * 5
    assert elgamal_dec(params, priv, a, b) == params.g1 * (999 * 5)

def test_elgamal_roundtrip_random():
    params = setup(rng=SeededSource(11))
    for _ in range(5):
        priv, pub = elgamal_keygen(params)
        m = params.rng.scalar(params.o)
        a, b, k = elgamal_enc(params, pub, m)
        assert elgamal_dec(params, priv, a, b) == m * params.g1

def test_elgamal_fresh_randomness():
    params = setup()
    priv, pub = elgamal_keygen(params)
    a1, b1, k1 = elgamal_enc(params, pub, 5)
    a2, b2, k2 = elgamal_enc(params, pub, 5)
    assert k1 != k2
    assert a1 != a2 and b1 != b2

def test_elgamal_wrong_key():
    params = setup()
    priv, pub = elgamal_keygen(params, 42)
    a, b, k = elgamal_enc(params, pub, 5)
    assert elgamal_dec(params, Bn(43), a, b) != 5 * params.g1

def test_elgamal_malformed():
    params = setup()
    priv, pub = elgamal_keygen(params)
    with pytest.raises(MalformedInput):
        elgamal_enc(params, params.g2, 5)
    with pytest.raises(MalformedInput):
        elgamal_enc(params, pub, params.o)
    with pytest.raises(MalformedInput):
        elgamal_enc(params, pub, 5, base=b"base")
