import os.path
import re

from paver.tasks import task
from paver.easy import sh


def tell(x):
    print()
    print(("-"*10)+ str(x) + ("-"*10))
    print()

@task
def build(quiet=True):
    """ Builds the blindcred distribution, ready to be uploaded to pypi. """
    tell("Build dist")
    sh('python setup.py sdist', capture=quiet)

@task
def upload(quiet=False):
    """ Uploads the latest distribution to pypi. """

    lib = open(os.path.join("blindcred", "__init__.py")).read()
    v = re.findall("VERSION.*=.*['\"](.*)['\"]", lib)[0]

    tell("upload dist %s" % v)
    sh('git tag -a v%s -m "Distribution version v%s"' % (v, v))
    sh('python -m twine upload dist/blindcred-%s.tar.gz' % v, capture=quiet)
    tell('Remember to upload tags using "git push --tags"')

@task
def test(quiet=False):
    """ Run the inline tests and doctests of all blindcred modules, with coverage. """
    tell("Run the tests")
    sh('py.test -v --cov=blindcred --cov-report=term-missing', capture=quiet)

@task
def lint(quiet=False):
    """ Run pylint on blindcred, skipping the inline test functions (see utils/ignoretest.py). """
    tell("Run pylint on the library")
    sh('PYTHONPATH=utils:$PYTHONPATH pylint --load-plugins ignoretest blindcred', capture=quiet)

@task
def wc(quiet=False):
    """ Count the blindcred library lines. """
    tell("Counting code lines")

    print("\nLibrary code:")
    sh('wc -l blindcred/*.py', capture=quiet)

    print("\nAdministration code:")
    sh('wc -l pavement.py setup.py utils/ignoretest.py', capture=quiet)
