""" Public parameters of the blind credential scheme, and input checks.

The parameters are an immutable tuple ``(G, o, g1, g2, h, e, rng)``
threaded explicitly through every operation:

* ``G``: the ``BpGroup`` (BN254, ``fp254bnb``),
* ``o``: the prime group order,
* ``g1``, ``g2``: the generators of G1 and G2,
* ``h``: a second G1 generator for Pedersen commitments,
* ``e``: the pairing ``e(G1, G2) -> GT``,
* ``rng``: the source of random scalars.

Example:
    >>> params = setup()
    >>> params.g1.isinf() or params.g2.isinf()
    False
    >>> params.o.num_bits() > 32
    True

"""

import logging
from collections import namedtuple

from petlib.bn import Bn
from bplib.bp import BpGroup, G1Elem, G2Elem

from .errors import ConfigurationError, MalformedInput
from .rand import OpenSSLSource

log = logging.getLogger(__name__)

PEDERSEN_LABEL = b"blindcred.pedersen.h"

Params = namedtuple("Params", ["G", "o", "g1", "g2", "h", "e", "rng"])


def setup(G=None, rng=None):
    """ Builds the system parameters from the curve constants.

    Args:
        G (BpGroup): the pairing group, by default the BN254 curve.
        rng: the random scalar source, by default ``OpenSSLSource()``.

    Returns:
        Params: the public parameters.

    Raises:
        ConfigurationError: if the pairing library cannot supply a valid group.
    """
    try:
        if G is None:
            G = BpGroup()
        g1, g2 = G.gen1(), G.gen2()
        o = G.order()
        # No one knows the discrete log of h with respect to g1
        h = G.hashG1(PEDERSEN_LABEL)
    except Exception as ex:
        raise ConfigurationError("Cannot load the pairing group: %s" % ex)

    if g1.isinf() or g2.isinf() or h.isinf() or h == g1:
        raise ConfigurationError("Invalid group generators.")
    if o.num_bits() <= 32 or not o.is_prime():
        raise ConfigurationError("Invalid group order.")

    if rng is None:
        rng = OpenSSLSource()

    log.debug("Loaded pairing group with a %d bit order", o.num_bits())
    return Params(G, o, g1, g2, h, G.pair, rng)


def to_scalar(params, value):
    """ Coerces an int or Bn into a scalar of Z_o, rejecting anything else.

    Example:
        >>> params = setup()
        >>> to_scalar(params, 42) == Bn(42)
        True

    """
    o = params.o
    if isinstance(value, bool):
        raise MalformedInput("Not a scalar.")
    if isinstance(value, int):
        if value < 0:
            raise MalformedInput("Scalar not reduced modulo the group order.")
        value = Bn.from_decimal(str(value))
    if not isinstance(value, Bn):
        raise MalformedInput("Not a scalar.")
    if not 0 <= value < o:
        raise MalformedInput("Scalar not reduced modulo the group order.")
    return value


def check_g1(params, pt):
    """ Rejects anything that is not a finite G1 point. """
    if not isinstance(pt, G1Elem) or pt.isinf():
        raise MalformedInput("Not a G1 point.")
    return pt


def check_g2(params, pt):
    """ Rejects anything that is not a finite point of the order o subgroup of G2. """
    if not isinstance(pt, G2Elem) or pt.isinf():
        raise MalformedInput("Not a G2 point.")
    # G2 has a cofactor: points on the curve may lie outside the subgroup
    if not (params.o * pt).isinf():
        raise MalformedInput("G2 point not in the prime order subgroup.")
    return pt


# --- TESTS ---

import pytest

def test_setup_generators():
    params = setup()
    (G, o, g1, g2, h, e, rng) = params
    assert not g1.isinf()
    assert not g2.isinf()
    assert not h.isinf()
    assert h != g1

def test_setup_order():
    params = setup()
    assert params.o.num_bits() > 32
    assert params.o.is_prime()
    assert params.o == params.G.order()

def test_setup_deterministic():
    p1, p2 = setup(), setup()
    assert p1.g1.export() == p2.g1.export()
    assert p1.g2.export() == p2.g2.export()
    assert p1.h.export() == p2.h.export()
    assert p1.o == p2.o

def test_pairing_bilinear():
    (G, o, g1, g2, h, e, rng) = setup()
    z = e(g1 * 2, g2 * 4)
    q = e(g1, g2).exp(8)
    assert z == q
    assert z != e(g1, g2)

def test_bad_group():
    class BrokenGroup(object):
        def gen1(self):
            raise Exception("no curve")

    with pytest.raises(ConfigurationError):
        setup(G=BrokenGroup())

def test_to_scalar():
    params = setup()
    assert to_scalar(params, 7) == Bn(7)
    big = params.o - 1
    assert to_scalar(params, big) == big
    assert to_scalar(params, big.int()) == big
    for bad in [-1, params.o, params.o.int(), "7", 1.5, None, True]:
        with pytest.raises(MalformedInput):
            to_scalar(params, bad)

def test_check_points():
    params = setup()
    assert check_g1(params, params.g1) == params.g1
    assert check_g2(params, params.g2) == params.g2
    with pytest.raises(MalformedInput):
        check_g1(params, params.g2)
    with pytest.raises(MalformedInput):
        check_g2(params, params.g1)
    with pytest.raises(MalformedInput):
        check_g1(params, G1Elem.inf(params.G))
    with pytest.raises(MalformedInput):
        check_g1(params, b"not a point")

class FakeGroup(object):
    """ A real group with one of its constants replaced. """

    def __init__(self, **overrides):
        self.G = BpGroup()
        self.overrides = overrides

    def gen1(self):
        return self.overrides.get("g1", self.G.gen1())

    def gen2(self):
        return self.overrides.get("g2", self.G.gen2())

    def order(self):
        return self.overrides.get("o", self.G.order())

    def hashG1(self, sbin):
        return self.overrides.get("h", self.G.hashG1(sbin))

    def pair(self, g1, g2):
        return self.G.pair(g1, g2)

def test_fake_group_passes():
    params = setup(G=FakeGroup())
    assert params.o == BpGroup().order()

def test_bad_generators():
    G = BpGroup()
    for overrides in [{"g1": G1Elem.inf(G)}, {"g2": G2Elem.inf(G)},
                      {"h": G1Elem.inf(G)}, {"h": G.gen1()}]:
        with pytest.raises(ConfigurationError):
            setup(G=FakeGroup(**overrides))

def test_bad_order():
    composite = BpGroup().order() + 1
    for o in [composite, Bn(4294967291), Bn(101)]:
        with pytest.raises(ConfigurationError):
            setup(G=FakeGroup(o=o))

def test_check_g2_subgroup():
    params = setup()
    assert check_g2(params, params.g2 * 12345) == params.g2 * 12345
    # Against a wrong order, o * g2 is no longer the identity
    wrong = params._replace(o=params.o - 1)
    with pytest.raises(MalformedInput):
        check_g2(wrong, params.g2)
