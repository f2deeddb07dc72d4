""" An issuing authority and a credential holder exchanging packed messages.

The three messages of the issuance protocol are:

1. Holder -> Authority: a packed ``BlindSignRequest`` together with the
   holder's ElGamal public key.
2. Authority -> Holder: ``["OK", BlindSignature]``, or
   ``["ERROR", "proof rejected"]`` with no further detail.
3. The holder unblinds the reply locally, and later shows rerandomized
   copies of its signature.

Example:
    >>> from blindcred.params import setup
    >>> params = setup()
    >>> authority = Authority(params)
    >>> holder = Holder(params, "age=32")
    >>> sigma = holder.receive(authority.handle_issue(holder.request()), authority.vk)
    >>> authority.check(holder.m, holder.show())
    True

"""

import logging

from .attributes import hash_string
from .errors import InvalidProof, MalformedInput
from .keys import keygen, elgamal_keygen
from .pack import encode, decode
from .proofs import prepare_blind_sign
from .scheme import blind_sign, unblind_sign, randomize, verify, BlindSignature

log = logging.getLogger(__name__)

REJECTED = "proof rejected"


class Authority(object):
    """ Holds a signing key and answers issuance requests. """

    def __init__(self, params, keypair=None):
        self.params = params
        if keypair is None:
            keypair = keygen(params)
        self._sk, self.vk = keypair

    def issue(self, pub, request):
        """ Blindly signs a decoded request, raising ``InvalidProof`` if its proof fails. """
        (a, b, cm, proof) = request
        return blind_sign(self.params, self._sk, cm, a, b, pub, proof)

    def handle_issue(self, packed):
        """ Answers a packed ``[pub, request]`` message with a packed reply. """
        try:
            pub, request = decode(packed, self.params.G)
            sigma_tilde = self.issue(pub, request)
        except (InvalidProof, MalformedInput, TypeError, ValueError):
            log.warning("Issuance request rejected")
            return encode(["ERROR", REJECTED])

        log.info("Issued a blind signature")
        return encode(["OK", sigma_tilde])

    def check(self, m, sigma):
        """ Verifies a shown signature on the attribute scalar m. """
        return verify(self.params, self.vk, m, sigma)


class Holder(object):
    """ Holds an ElGamal key, an attribute and, once issued, a signature on it. """

    def __init__(self, params, attribute, keypair=None):
        self.params = params
        if keypair is None:
            keypair = elgamal_keygen(params)
        self._d, self.pub = keypair
        self.m = hash_string(params, attribute)
        self.sigma = None

    def request(self):
        """ Builds the packed issuance request for the holder's attribute. """
        req = prepare_blind_sign(self.params, self.pub, self.m)
        return encode([self.pub, req])

    def receive(self, packed_reply, vk):
        """ Unblinds the authority's reply into a signature and checks it against vk.

        Raises:
            InvalidProof: if the authority refused the request, or returned a
                signature that does not verify.
        """
        try:
            status, body = decode(packed_reply, self.params.G)
            if status != "OK" or not isinstance(body, BlindSignature):
                raise InvalidProof()
            sigma = unblind_sign(self.params, body, self._d)
        except (MalformedInput, TypeError, ValueError):
            raise InvalidProof()

        if not verify(self.params, vk, self.m, sigma):
            raise InvalidProof("signature does not verify")

        self.sigma = sigma
        return sigma

    def show(self):
        """ Returns a fresh rerandomized copy of the issued signature. """
        if self.sigma is None:
            raise ValueError("No signature issued yet.")
        return randomize(self.params, self.sigma)


# --- TESTS ---

import pytest

from .params import setup
from .proofs import ProofS, BlindSignRequest
from .rand import SeededSource

def test_issuance():
    params = setup()
    authority = Authority(params, keygen(params, 40, 42))
    holder = Holder(params, "age=32", elgamal_keygen(params, 90))

    reply = authority.handle_issue(holder.request())
    sigma = holder.receive(reply, authority.vk)

    assert authority.check(hash_string(params, "age=32"), sigma)
    show1, show2 = holder.show(), holder.show()
    assert show1.h != show2.h
    assert authority.check(holder.m, show1)
    assert authority.check(holder.m, show2)
    assert not authority.check(hash_string(params, "age=33"), show1)

def test_rejected_proof():
    params = setup()
    authority = Authority(params)
    holder = Holder(params, "age=32")

    pub, req = decode(holder.request(), params.G)
    bad_proof = ProofS(req.proof.c, (req.proof.rm + 1) % params.o, req.proof.rk, req.proof.rr)
    bad = BlindSignRequest(req.a, req.b, req.cm, bad_proof)
    reply = authority.handle_issue(encode([pub, bad]))
    assert decode(reply, params.G) == ["ERROR", REJECTED]

    with pytest.raises(InvalidProof):
        holder.receive(reply, authority.vk)

def test_rejected_garbage():
    params = setup()
    authority = Authority(params)
    for packed in [b"\xc1", encode(["hello"]), encode([params.g1, [1, 2, 3, 4]])]:
        assert decode(authority.handle_issue(packed), params.G) == ["ERROR", REJECTED]

def test_wrong_authority_key():
    params = setup()
    authority = Authority(params)
    other = Authority(params)
    holder = Holder(params, "age=32")
    reply = authority.handle_issue(holder.request())
    with pytest.raises(InvalidProof):
        holder.receive(reply, other.vk)
    assert holder.sigma is None

def test_show_before_issue():
    params = setup()
    holder = Holder(params, "age=32")
    with pytest.raises(ValueError):
        holder.show()

def test_seeded_issuance():
    params = setup(rng=SeededSource(1))
    authority = Authority(params)
    holder = Holder(params, u"name=Alice")
    holder.receive(authority.handle_issue(holder.request()), authority.vk)
    assert authority.check(holder.m, holder.show())

def test_receive_malformed_reply():
    params = setup()
    authority = Authority(params)
    holder = Holder(params, "age=32")
    from bplib.bp import G1Elem
    g1, inf = params.g1, G1Elem.inf(params.G)

    replies = [b"\xc1", encode(["OK"]), encode("OK"),
               encode(["OK", BlindSignature(g1, inf, g1)]),
               encode(["OK", [g1, g1, g1]])]
    for reply in replies:
        with pytest.raises(InvalidProof):
            holder.receive(reply, authority.vk)
    assert holder.sigma is None
