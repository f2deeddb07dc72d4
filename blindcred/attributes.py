""" Mapping attribute strings to scalars. """

from hashlib import sha256

from petlib.bn import Bn

ATTRIBUTE_LABEL = b"blindcred.attribute"


def hash_to_scalar(value, o):
    """ Hashes a string (or bytes) into Z_o, domain separated from other hash uses.

    Example:
        >>> from petlib.bn import Bn
        >>> o = Bn(1000003)
        >>> hash_to_scalar("age=32", o) == hash_to_scalar(b"age=32", o)
        True
        >>> hash_to_scalar("age=32", o) < o
        True

    """
    if not isinstance(value, bytes):
        value = value.encode("utf8")
    H = sha256()
    H.update(ATTRIBUTE_LABEL)
    H.update(b"|")
    H.update(value)
    return Bn.from_binary(H.digest()) % o


def hash_string(params, value):
    """ Hashes an attribute string into a scalar of the group order. """
    return hash_to_scalar(value, params.o)


# --- TESTS ---

from .params import setup

def test_hash_deterministic():
    params = setup()
    assert hash_string(params, "age=32") == hash_string(params, "age=32")

def test_hash_distinct():
    params = setup()
    values = ["age=32", "age=33", "Age=32", "", "age=32 "]
    hashes = set(hash_string(params, v).int() for v in values)
    assert len(hashes) == len(values)

def test_hash_reduced():
    params = setup()
    for i in range(20):
        m = hash_string(params, "attr%d" % i)
        assert 0 <= m < params.o

def test_hash_domain_separated():
    params = setup()
    plain = Bn.from_binary(sha256(b"age=32").digest()) % params.o
    assert hash_string(params, "age=32") != plain

def test_hash_unicode():
    params = setup()
    assert hash_string(params, u"name=Jürgen") == hash_string(params, u"name=Jürgen".encode("utf8"))
