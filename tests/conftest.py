"""Shared test fixtures."""

from __future__ import annotations

import pytest


RED_SQUARE_XML = '''<?xml version="1.0" encoding="utf-8"?>
<vector xmlns:android="http://schemas.android.com/apk/res/android"
    android:width="24dp"
    android:height="24dp"
    android:viewportWidth="24"
    android:viewportHeight="24">
  <path android:fillColor="#F00" android:pathData="M4,4 L20,4 L20,20 L4,20 Z"/>
</vector>'''

# viewport half the canvas size; fill comes from a named color
NAMED_COLORS_XML = '''<vector xmlns:android="http://schemas.android.com/apk/res/android"
    android:width="48dp" android:height="24dp"
    android:viewportWidth="24" android:viewportHeight="12">
  <path android:fillColor="@color/accent" android:pathData="M0,0h12v12h-12z"/>
  <path android:strokeColor="brand" android:strokeWidth="2" android:pathData="M12,6 L24,6"/>
</vector>'''

COLORS_XML = '''<?xml version="1.0" encoding="utf-8"?>
<resources>
  <color name="accent">@color/base</color>
  <color name="base">#0000FF</color>
  <color name="half">#800000FF</color>
</resources>'''

NOT_A_VECTOR_XML = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <path d="M4 4h16v16H4z"/>
</svg>'''


@pytest.fixture
def write_file(tmp_path):
    def write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def red_square_path(write_file) -> str:
    return write_file("square.xml", RED_SQUARE_XML)


@pytest.fixture
def colors_path(write_file) -> str:
    return write_file("colors.xml", COLORS_XML)
