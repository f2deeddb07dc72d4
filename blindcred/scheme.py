""" Blind issuance, unblinding, rerandomization and verification of signatures.

A signature on the attribute ``m`` under the signing key ``(x, y)`` is a
pair ``(h, s)`` with ``s = (x + y * m) * h``. It verifies when

    e(s, g2) == e(h, X) * e(h, Y) ^ m

for the verification key ``(X, Y) = (x * g2, y * g2)``. The authority
computes such a signature without learning ``m`` by working on the
holder's ElGamal ciphertext of ``m`` (see ``blindcred.proofs``).

Example:
    >>> from blindcred.params import setup
    >>> from blindcred.keys import keygen, elgamal_keygen
    >>> from blindcred.proofs import prepare_blind_sign
    >>> params = setup()
    >>> sk, vk = keygen(params)
    >>> d, gamma = elgamal_keygen(params)
    >>> (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, 42)
    >>> sigma_tilde = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    >>> sigma = unblind_sign(params, sigma_tilde, d)
    >>> verify(params, vk, 42, randomize(params, sigma))
    True

"""

from collections import namedtuple

from .errors import InvalidProof, MalformedInput
from .params import to_scalar, check_g1, check_g2
from .proofs import verify_pi_s

BlindSignature = namedtuple("BlindSignature", ["h", "t2", "t3"])
Signature = namedtuple("Signature", ["h", "s"])


def blind_sign(params, sk, cm, a, b, pub, proof):
    """ The authority signs the attribute hidden in ``(a, b)`` and ``cm``.

    Args:
        params (Params): the system parameters.
        sk (SigningKey): the authority secret ``(x, y)``.
        cm (G1Elem): the holder's commitment to the attribute.
        a, b (G1Elem): the ElGamal ciphertext of the attribute.
        pub (G1Elem): the holder's ElGamal public key.
        proof (ProofS): the proof of correctness of ``(a, b, cm)``.

    Returns:
        BlindSignature: ``(h, t2, t3)``, an encryption of ``(x + y*m) * h``
        under ``pub``.

    Raises:
        MalformedInput: if a point or key scalar fails its membership check.
        InvalidProof: if the proof does not verify.
    """
    (G, o, g1, g2, h, e, rng) = params
    for pt in [cm, a, b, pub]:
        check_g1(params, pt)
    (x, y) = [to_scalar(params, v) for v in sk]

    if not verify_pi_s(params, pub, a, b, cm, proof):
        raise InvalidProof()

    hc = G.hashG1(cm.export())
    t2 = y * a
    t3 = x * hc + y * b
    return BlindSignature(hc, t2, t3)


def unblind_sign(params, sigma_tilde, d):
    """ The holder decrypts a blind signature into a signature ``(h, s)``. """
    (hc, t2, t3) = sigma_tilde
    for pt in [hc, t2, t3]:
        check_g1(params, pt)
    d = to_scalar(params, d)
    s = t3 + ((-d) % params.o) * t2
    return Signature(hc, s)


def randomize(params, sigma):
    """ Returns a fresh, unlinkable signature ``(t*h, t*s)`` on the same attribute. """
    (G, o, g1, g2, h, e, rng) = params
    (sig_h, sig_s) = sigma
    check_g1(params, sig_h)
    check_g1(params, sig_s)
    t = rng.nonzero_scalar(o)
    return Signature(t * sig_h, t * sig_s)


def verify(params, vk, m, sigma):
    """ Checks a (possibly randomized) signature on the attribute m. Never raises. """
    (G, o, g1, g2, h, e, rng) = params
    try:
        (X, Y) = vk
        check_g2(params, X)
        check_g2(params, Y)
        (sig_h, sig_s) = sigma
        m = to_scalar(params, m)
        check_g1(params, sig_h)
        check_g1(params, sig_s)
    except (MalformedInput, TypeError, ValueError):
        return False

    return e(sig_s, g2) == e(sig_h, X).mul(e(sig_h, Y).exp(m))


# --- TESTS ---

import pytest
from petlib.bn import Bn

from .attributes import hash_string
from .keys import keygen, elgamal_keygen
from .params import setup
from .proofs import prepare_blind_sign, ProofS
from .rand import SeededSource

def issue(params, sk, gamma, d, m):
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, m)
    sigma_tilde = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    return unblind_sign(params, sigma_tilde, d)

def test_blind_sign_roundtrip():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    for _ in range(3):
        m = params.rng.scalar(params.o)
        sigma = issue(params, sk, gamma, d, m)
        (sig_h, s) = sigma
        assert s == ((sk.x + sk.y * m) % params.o) * sig_h
        assert verify(params, vk, m, sigma)

def test_blind_sign_is_encryption():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    m = Bn(7)
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, m)
    (hc, t2, t3) = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    assert hc == params.G.hashG1(cm.export())
    assert t2 == sk.y * a
    assert t3 != ((sk.x + sk.y * m) % params.o) * hc

def test_blind_sign_rejects_bad_proof():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, 42)
    bad = ProofS(pi_s.c, pi_s.rm, (pi_s.rk + 1) % params.o, pi_s.rr)
    with pytest.raises(InvalidProof) as excinfo:
        blind_sign(params, sk, cm, a, b, gamma, bad)
    assert str(excinfo.value) == "proof rejected"

    # A proof for another ciphertext is refused as well
    (a2, b2, cm2, pi_s2) = prepare_blind_sign(params, gamma, 42)
    with pytest.raises(InvalidProof):
        blind_sign(params, sk, cm, a, b, gamma, pi_s2)

def test_blind_sign_malformed():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, 42)
    with pytest.raises(MalformedInput):
        blind_sign(params, sk, params.g2, a, b, gamma, pi_s)
    with pytest.raises(MalformedInput):
        blind_sign(params, (sk.x, params.o), cm, a, b, gamma, pi_s)

def test_unblind_wrong_key():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, 42)
    sigma_tilde = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    sigma = unblind_sign(params, sigma_tilde, (d + 1) % params.o)
    assert not verify(params, vk, 42, sigma)

def test_verify_wrong_attribute_and_key():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    sigma = issue(params, sk, gamma, d, 42)
    assert verify(params, vk, 42, sigma)
    assert not verify(params, vk, 43, sigma)
    other_sk, other_vk = keygen(params)
    assert not verify(params, other_vk, 42, sigma)

def test_verify_malformed():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    sigma = issue(params, sk, gamma, d, 42)
    from bplib.bp import G1Elem
    inf = G1Elem.inf(params.G)
    assert not verify(params, vk, 42, Signature(inf, inf))
    assert not verify(params, vk, 42, None)
    assert not verify(params, vk, -1, sigma)
    assert not verify(params, vk, 42, (sigma.h,))

def test_randomize():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    m = hash_string(params, "age=32")
    sigma = issue(params, sk, gamma, d, m)

    sigma1 = randomize(params, sigma)
    sigma2 = randomize(params, sigma)
    assert sigma1.h != sigma.h and sigma1.s != sigma.s
    assert sigma1.h != sigma2.h
    assert verify(params, vk, m, sigma1)
    assert verify(params, vk, m, sigma2)
    assert verify(params, vk, m, randomize(params, sigma1))
    assert not verify(params, vk, hash_string(params, "age=33"), sigma1)

def test_end_to_end():
    params = setup(rng=SeededSource(2018))
    sk, vk = keygen(params, 40, 42)
    d, gamma = elgamal_keygen(params, 90)
    m = hash_string(params, "age=32")

    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, m)
    assert verify_pi_s(params, gamma, a, b, cm, pi_s)
    sigma_tilde = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    sigma = unblind_sign(params, sigma_tilde, d)
    sigma_prime = randomize(params, sigma)

    assert verify(params, vk, m, sigma_prime)
    assert vk.X == params.g2 * 40
    assert vk.Y == params.g2 * 42

def test_unblind_malformed():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    (a, b, cm, pi_s) = prepare_blind_sign(params, gamma, 42)
    (hc, t2, t3) = blind_sign(params, sk, cm, a, b, gamma, pi_s)
    from bplib.bp import G1Elem
    inf = G1Elem.inf(params.G)

    for bad in [BlindSignature(hc, inf, t3), BlindSignature(hc, params.g2, t3),
                BlindSignature(hc, t2, b"t3")]:
        with pytest.raises(MalformedInput):
            unblind_sign(params, bad, d)
    with pytest.raises(MalformedInput):
        unblind_sign(params, BlindSignature(hc, t2, t3), params.o)
    with pytest.raises(ValueError):
        unblind_sign(params, (hc, t2), d)

def test_randomize_malformed():
    params = setup()
    sk, vk = keygen(params)
    d, gamma = elgamal_keygen(params)
    sigma = issue(params, sk, gamma, d, 42)
    from bplib.bp import G1Elem
    inf = G1Elem.inf(params.G)

    for bad in [Signature(inf, sigma.s), Signature(sigma.h, inf),
                Signature(params.g2, sigma.s), Signature(sigma.h, 42)]:
        with pytest.raises(MalformedInput):
            randomize(params, bad)
    with pytest.raises(ValueError):
        randomize(params, (sigma.h,))
