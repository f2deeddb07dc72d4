""" The holder's request for a blind signature, and its zero-knowledge proof.

The holder commits to its attribute ``m`` with a Pedersen commitment
``cm = m * g1 + r * h``, hashes the commitment into a point
``hc = G.hashG1(cm)`` and ElGamal-encrypts ``m`` in the base ``hc``:
``(a, b) = (k * g1, k * pub + m * hc)``. The proof ``pi_s`` shows knowledge
of ``(m, k, r)`` consistent with both the ciphertext and the commitment,
made non-interactive with the Fiat-Shamir heuristic:

    ZK(m, k, r; a = k * g1, b = k * pub + m * hc, cm = m * g1 + r * h)

Example:
    >>> from blindcred.params import setup
    >>> from blindcred.keys import elgamal_keygen
    >>> params = setup()
    >>> priv, pub = elgamal_keygen(params)
    >>> req = prepare_blind_sign(params, pub, 42)
    >>> verify_pi_s(params, pub, req.a, req.b, req.cm, req.proof)
    True

"""

from collections import namedtuple
from hashlib import sha256
from binascii import hexlify

from petlib.bn import Bn

from .elgamal import elgamal_enc
from .errors import MalformedInput
from .params import to_scalar, check_g1

CHALLENGE_LABEL = b"blindcred.pi_s"

ProofS = namedtuple("ProofS", ["c", "rm", "rk", "rr"])
BlindSignRequest = namedtuple("BlindSignRequest", ["a", "b", "cm", "proof"])


def to_challenge(o, elements):
    """ Hashes a list of points into a challenge scalar in Z_o. """
    Cstring = b",".join([CHALLENGE_LABEL] + [hexlify(x.export()) for x in elements])
    Chash = sha256(Cstring).digest()
    return Bn.from_binary(Chash) % o


def _statement(params, pub, a, b, cm, hc):
    (G, o, g1, g2, h, e, rng) = params
    return [g1, g2, h, pub, a, b, cm, hc]


def prepare_blind_sign(params, pub, m):
    """ Builds the ciphertext, commitment and proof the authority needs to sign m blindly.

    Args:
        params (Params): the system parameters.
        pub (G1Elem): the holder's ElGamal public key.
        m (Bn): the attribute scalar, as returned by ``hash_string``.

    Returns:
        BlindSignRequest: ``(a, b, cm, proof)``. The witnesses ``k`` and ``r``
        are not part of the request and are dropped on return.
    """
    (G, o, g1, g2, h, e, rng) = params
    check_g1(params, pub)
    m = to_scalar(params, m)

    r = rng.scalar(o)
    cm = m * g1 + r * h
    hc = G.hashG1(cm.export())
    (a, b, k) = elgamal_enc(params, pub, m, hc)

    proof = make_pi_s(params, pub, a, b, cm, m, k, r)
    return BlindSignRequest(a, b, cm, proof)


def make_pi_s(params, pub, a, b, cm, m, k, r):
    """ Proves knowledge of ``(m, k, r)`` behind the ciphertext ``(a, b)`` and commitment ``cm``. """
    (G, o, g1, g2, h, e, rng) = params
    hc = G.hashG1(cm.export())

    # Blinding factors
    wm, wk, wr = rng.scalar(o), rng.scalar(o), rng.scalar(o)

    # Witness commitments
    Aw = wk * g1
    Bw = wk * pub + wm * hc
    Cw = wm * g1 + wr * h

    c = to_challenge(o, _statement(params, pub, a, b, cm, hc) + [Aw, Bw, Cw])

    rm = (wm + c * m) % o
    rk = (wk + c * k) % o
    rr = (wr + c * r) % o
    return ProofS(c, rm, rk, rr)


def verify_pi_s(params, pub, a, b, cm, proof):
    """ Checks a proof built by ``make_pi_s``. Never raises: any bad input gives False. """
    (G, o, g1, g2, h, e, rng) = params
    try:
        for pt in [pub, a, b, cm]:
            check_g1(params, pt)
        (c, rm, rk, rr) = [to_scalar(params, v) for v in proof]
    except (MalformedInput, TypeError, ValueError):
        return False

    hc = G.hashG1(cm.export())
    nc = (-c) % o

    # Recompute the witness commitments from the responses
    Aw = rk * g1 + nc * a
    Bw = rk * pub + rm * hc + nc * b
    Cw = rm * g1 + rr * h + nc * cm

    return c == to_challenge(o, _statement(params, pub, a, b, cm, hc) + [Aw, Bw, Cw])


# --- TESTS ---

import pytest

from .elgamal import elgamal_dec
from .keys import elgamal_keygen
from .params import setup
from .rand import SeededSource

@pytest.fixture
def env():
    params = setup()
    priv, pub = elgamal_keygen(params)
    m = params.rng.scalar(params.o)
    return params, priv, pub, m

def test_prepare_structure(env):
    params, priv, pub, m = env
    req = prepare_blind_sign(params, pub, m)
    assert isinstance(req.proof, ProofS)
    hc = params.G.hashG1(req.cm.export())
    # The ciphertext encrypts m in the base derived from the commitment
    assert elgamal_dec(params, priv, req.a, req.b) == m * hc

def test_pi_s_valid(env):
    params, priv, pub, m = env
    for _ in range(3):
        req = prepare_blind_sign(params, pub, m)
        assert verify_pi_s(params, pub, req.a, req.b, req.cm, req.proof)

def test_pi_s_seeded():
    params = setup(rng=SeededSource(5))
    priv, pub = elgamal_keygen(params, 90)
    req = prepare_blind_sign(params, pub, 1234)
    assert verify_pi_s(params, pub, req.a, req.b, req.cm, req.proof)

def test_pi_s_tampered_proof(env):
    params, priv, pub, m = env
    (a, b, cm, proof) = prepare_blind_sign(params, pub, m)
    for i in range(len(proof)):
        fields = list(proof)
        fields[i] = (fields[i] + 1) % params.o
        bad = ProofS(*fields)
        assert not verify_pi_s(params, pub, a, b, cm, bad)

def test_pi_s_tampered_statement(env):
    params, priv, pub, m = env
    (a, b, cm, proof) = prepare_blind_sign(params, pub, m)
    g1 = params.g1
    assert not verify_pi_s(params, pub, a + g1, b, cm, proof)
    assert not verify_pi_s(params, pub, a, b + g1, cm, proof)
    assert not verify_pi_s(params, pub, a, b, cm + g1, proof)
    assert not verify_pi_s(params, pub + g1, a, b, cm, proof)

def test_pi_s_swapped_requests(env):
    params, priv, pub, m = env
    req1 = prepare_blind_sign(params, pub, m)
    req2 = prepare_blind_sign(params, pub, m)
    assert not verify_pi_s(params, pub, req1.a, req1.b, req1.cm, req2.proof)

def test_pi_s_malformed(env):
    params, priv, pub, m = env
    (a, b, cm, proof) = prepare_blind_sign(params, pub, m)
    assert not verify_pi_s(params, pub, a, b, cm, None)
    assert not verify_pi_s(params, pub, a, b, cm, proof[:3])
    assert not verify_pi_s(params, pub, a, b, cm, (proof.c, proof.rm, proof.rk, params.o))
    assert not verify_pi_s(params, pub, a, b, cm, (proof.c, proof.rm, proof.rk, "x"))
    assert not verify_pi_s(params, pub, params.g2, b, cm, proof)
    assert not verify_pi_s(params, pub, a, b, b"cm", proof)

def test_prepare_malformed(env):
    params, priv, pub, m = env
    with pytest.raises(MalformedInput):
        prepare_blind_sign(params, pub, -1)
    with pytest.raises(MalformedInput):
        prepare_blind_sign(params, params.g2, m)
