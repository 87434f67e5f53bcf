"""
mkpw.completion
Shell completion scripts for the mkpw command line.
"""

import argparse

import shtab

# bash, zsh and tcsh
SHELLS = tuple(shtab.SUPPORTED_SHELLS)


def completion_script(parser: argparse.ArgumentParser, shell: str) -> str:
    return shtab.complete(parser, shell=shell)
