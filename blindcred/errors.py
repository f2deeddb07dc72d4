""" The exceptions raised by blindcred.

Cryptographic mismatches (a wrong key, a wrong attribute) are never
reported through exceptions: ``verify_pi_s`` and ``verify`` return
``False``. Exceptions are kept for broken configuration, malformed inputs
and refused signing requests.

Example:
    >>> issubclass(InvalidProof, BlindCredError)
    True

"""


class BlindCredError(Exception):
    """ Base class of all blindcred errors. """


class ConfigurationError(BlindCredError):
    """ The pairing library could not supply valid curve parameters. """


class InvalidProof(BlindCredError):
    """ A signing request was refused. Carries no detail about which check failed. """

    def __init__(self, msg="proof rejected"):
        BlindCredError.__init__(self, msg)


class MalformedInput(BlindCredError):
    """ A scalar or point failed a basic membership check. """


# --- TESTS ---

def test_invalid_proof_message():
    e = InvalidProof()
    assert str(e) == "proof rejected"
    assert isinstance(e, BlindCredError)

def test_hierarchy():
    for cls in [ConfigurationError, InvalidProof, MalformedInput]:
        assert issubclass(cls, BlindCredError)
        assert issubclass(cls, Exception)
