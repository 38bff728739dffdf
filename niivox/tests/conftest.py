# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the niivox package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
import pytest


@pytest.fixture
def in_tmp_path(tmp_path, monkeypatch):
    """Run the test with a fresh temporary directory as working directory"""
    monkeypatch.chdir(tmp_path)
    return tmp_path
