# The blindcred version
VERSION = '0.0.1'


__all__ = ["attributes", "elgamal", "errors", "issuer", "keys", "pack",
           "params", "proofs", "rand", "scheme"]

def run_tests():
    # These are only needed in case we test
    import pytest
    import os.path
    import glob

    # List all blindcred files in the directory
    blindcred_dir = os.path.dirname(os.path.realpath(__file__))
    pyfiles = glob.glob(os.path.join(blindcred_dir, '*.py'))

    # Run the test suite
    print("Directory: %s" % pyfiles)
    res = pytest.main(["-v", "-x", "--doctest-modules"] + pyfiles)
    print("Result: %s" % res)

    # Return exit result
    return res
