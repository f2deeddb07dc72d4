"""The module provides functions to pack and unpack blindcred messages: scalars,
G1 and G2 points, and the protocol structures exchanged between a holder and an
authority.

Points are serialized with the pairing library's own ``export`` format, so
decoding needs the ``BpGroup`` the points belong to.

Example:
    >>> from blindcred.params import setup
    >>> from blindcred.scheme import Signature
    >>> params = setup()
    >>> sigma = Signature(params.g1, 2 * params.g1)
    >>> decode(encode(["OK", sigma]), params.G) == ["OK", sigma]
    True

"""

import msgpack

from petlib.bn import Bn
from bplib.bp import G1Elem, G2Elem

from .errors import MalformedInput
from .keys import VerificationKey
from .proofs import ProofS, BlindSignRequest
from .scheme import BlindSignature, Signature

__all__ = ["encode", "decode", "register_coders"]

_pack_reg = {}
_unpack_reg = {}


def register_coders(cls, num, enc_func, dec_func):
    """ Register a new type for encoding and decoding.
    Take a class type, a number, an encoding function ``obj -> bytes`` and a
    decoding function ``(bytes, group) -> obj``."""

    if num in _unpack_reg or cls in _pack_reg:
        raise Exception("Class or number already in use.")

    coders = (cls, num, enc_func, dec_func)
    _pack_reg[cls] = coders
    _unpack_reg[num] = coders


def bn_enc(obj):
    if obj < 0:
        neg = b"-"
        data = (-obj).binary()
    else:
        neg = b"+"
        data = obj.binary()
    return neg + data


def bn_dec(data, G):
    num = Bn.from_binary(data[1:])
    if data[0:1] == b"-":
        return -num
    return num


def g1_enc(obj):
    return obj.export()


def g1_dec(data, G):
    return G1Elem.from_bytes(data, G)


def g2_enc(obj):
    return obj.export()


def g2_dec(data, G):
    return G2Elem.from_bytes(data, G)


def tuple_coders(cls):
    """ Coders for a namedtuple of encodable fields. """

    def enc(obj):
        return encode(list(obj))

    def dec(data, G):
        return cls(*decode(data, G))

    return enc, dec


def _init_coders():
    global _pack_reg, _unpack_reg
    _pack_reg, _unpack_reg = {}, {}
    register_coders(Bn, 0, bn_enc, bn_dec)
    register_coders(G1Elem, 1, g1_enc, g1_dec)
    register_coders(G2Elem, 2, g2_enc, g2_dec)

    for num, cls in enumerate([ProofS, BlindSignRequest, BlindSignature,
                               Signature, VerificationKey]):
        enc, dec = tuple_coders(cls)
        register_coders(cls, 10 + num, enc, dec)


# Register default coders
_init_coders()


def default(obj):
    T = type(obj)
    if T in _pack_reg:
        _, num, enc, _ = _pack_reg[T]
        return msgpack.ExtType(num, enc(obj))

    # Plain tuples travel as lists
    if T is tuple:
        return list(obj)

    raise TypeError("Unknown type: %r" % (T,))


def make_decoder(G):
    def ext_hook(code, data):
        if code in _unpack_reg:
            _, _, _, dec = _unpack_reg[code]
            return dec(data, G)

        # Other
        return msgpack.ExtType(code, data)
    return ext_hook


def encode(structure):
    """ Encode a structure containing blindcred objects to a binary format. """
    return msgpack.packb(structure, default=default, use_bin_type=True, strict_types=True)


def decode(packed_data, G):
    """ Decode a binary byte sequence into a structure of blindcred objects over the group G.

    Raises:
        MalformedInput: if the bytes do not decode to valid objects.
    """
    try:
        return msgpack.unpackb(packed_data, ext_hook=make_decoder(G), raw=False)
    except MalformedInput:
        raise
    except Exception as ex:
        # The pairing library reports invalid points with a bare Exception
        raise MalformedInput("Cannot decode message: %s" % ex)

# --- TESTS ---

import pytest

from .keys import keygen, elgamal_keygen
from .params import setup
from .proofs import prepare_blind_sign

def test_bn():
    params = setup()
    test_data = [Bn(1), Bn(2), -Bn(1), params.o]
    assert decode(encode(test_data), params.G) == test_data

def test_points():
    params = setup()
    test_data = [params.g1, params.h, params.g2]
    x = decode(encode(test_data), params.G)
    assert x[0] == params.g1
    assert x[1] == params.h
    assert x[2] == params.g2

def test_request():
    params = setup()
    d, gamma = elgamal_keygen(params)
    req = prepare_blind_sign(params, gamma, 42)
    x = decode(encode(req), params.G)
    assert isinstance(x, BlindSignRequest)
    assert isinstance(x.proof, ProofS)
    assert x == req

def test_plain_tuples_and_keys():
    params = setup()
    sk, vk = keygen(params)
    x = decode(encode([(1, b"two"), vk, u"three"]), params.G)
    assert x[0] == [1, b"two"]
    assert x[1] == vk
    assert x[2] == u"three"

def test_unknown_type():
    params = setup()
    with pytest.raises(TypeError):
        encode([params.G])

def test_garbage():
    params = setup()
    with pytest.raises(MalformedInput):
        decode(b"\xc1", params.G)
    bad_point = msgpack.packb(msgpack.ExtType(1, b"\x02" + b"\xff" * 32), use_bin_type=True)
    with pytest.raises(MalformedInput):
        decode(bad_point, params.G)

def test_register_twice():
    with pytest.raises(Exception):
        register_coders(Bn, 99, bn_enc, bn_dec)
    with pytest.raises(Exception):
        register_coders(object, 0, bn_enc, bn_dec)
