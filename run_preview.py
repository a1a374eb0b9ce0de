import shlex
import subprocess
import sys

if sys.version_info[:2] < (3, 9):
    print('Python 3.9 or later is required to run the preview.')
    sys.exit(1)

missing_deps_text = ''
missing_deps: list[str] = []

has_colorama = True
try:
    import colorama
except ModuleNotFoundError:
    has_colorama = False
if not has_colorama:
    missing_deps_text += ' - Colorama (colorama)\n'
    missing_deps.append('colorama')

has_opensimplex = True
try:
    import opensimplex
except ModuleNotFoundError:
    has_opensimplex = False
if not has_opensimplex:
    missing_deps_text += ' - OpenSimplex Noise (opensimplex)\n'
    missing_deps.append('opensimplex')

has_typing_extensions = True
try:
    from typing_extensions import Self
except ImportError:
    has_typing_extensions = False
if not has_typing_extensions:
    missing_deps_text += ' - typing_extensions 4.0.0 or later (typing_extensions>=4.0.0)\n'
    missing_deps.append('typing_extensions>=4.0.0')

if missing_deps:
    print('You appear to be missing the following requirements for the preview to run:')
    print(missing_deps_text, end='')
    yes = input('Would you like to install them? [Y/n] ')
    if not yes or yes[0].lower() == 'y':
        args = [sys.executable, '-m', 'pip', 'install', '-U'] + missing_deps
        print(shlex.join(args))
        result = subprocess.run(args)
        if result.returncode != 0:
            print('Install failed with return code', result.returncode)
            sys.exit(1)
    else:
        print('Installation cancelled.')
        sys.exit(0)

from tilestream.preview import main
main()
