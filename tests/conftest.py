"""Shared fixtures: NeXML documents and a clean environment."""

import os

import pytest

FULL_DOCUMENT = """\
<?xml version="1.0" encoding="UTF-8"?>
<nex:nexml xmlns:nex="http://www.nexml.org/2009"
           xmlns="http://www.nexml.org/2009"
           xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
           version="0.9" generator="handwritten">
  <!-- taxa first, trees refer to them -->
  <otus id="taxa1" label="Primates">
    <otu id="t1" label="Homo sapiens"/>
    <otu id="t2" label="Pan paniscus"/>
    <otu id="t3" label="Gorilla gorilla"/>
  </otus>
  <trees id="trees1" otus="taxa1" label="Primate trees">
    <tree id="tree1" xsi:type="nex:FloatTree" label="Float tree">
      <node id="n1" root="true"/>
      <node id="n2" otu="t1" label="human"/>
      <node id="n3"/>
      <node id="n4" otu="t2"/>
      <node id="n5" otu="t3"/>
      <rootedge id="re1" target="n1" length="0.1"/>
      <edge id="e12" source="n1" target="n2" length="0.5"/>
      <edge id="e13" source="n1" target="n3" length="0.25"/>
      <edge id="e34" source="n3" target="n4" length="1.5"/>
      <edge id="e35" source="n3" target="n5"/>
    </tree>
    <tree id="tree2" xsi:type="nex:IntTree">
      <node id="m1" root="1"/>
      <node id="m2" otu="t1"/>
      <edge id="f12" source="m1" target="m2" length="3"/>
    </tree>
    <network id="net1" xsi:type="nex:IntNetwork">
      <node id="r1" root="true"/>
      <node id="r2"/>
      <node id="r3"/>
      <node id="r4" otu="t3"/>
      <edge id="g12" source="r1" target="r2" length="1"/>
      <edge id="g13" source="r1" target="r3" length="1"/>
      <edge id="g24" source="r2" target="r4" length="2"/>
      <edge id="g34" source="r3" target="r4" length="2"/>
    </network>
  </trees>
</nex:nexml>
"""

TAXA_ONLY = """\
<nexml xmlns="http://www.nexml.org/2009" version="0.9">
  <otus id="taxa1">
    <otu id="t1"/>
    <otu id="t2"/>
  </otus>
</nexml>
"""

WITH_UNKNOWN = """\
<nexml xmlns="http://www.nexml.org/2009" version="0.9">
  <otus id="taxa1">
    <meta property="dc:creator" content="someone"/>
    <otu id="t1"><meta property="dc:description"/></otu>
  </otus>
  <characters id="m1"><format/></characters>
</nexml>
"""


@pytest.fixture
def full_document():
    return FULL_DOCUMENT


@pytest.fixture
def taxa_only():
    return TAXA_ONLY


@pytest.fixture
def with_unknown():
    return WITH_UNKNOWN


@pytest.fixture
def nexml_file(tmp_path, full_document):
    path = tmp_path / "primates.xml"
    path.write_text(full_document, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any NEXMAP_* variables from the environment."""
    for name in list(os.environ):
        if name.startswith("NEXMAP_"):
            monkeypatch.delenv(name)
