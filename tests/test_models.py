from aliasman.models import SYSTEM_GROUP, Alias, AliasNode, GroupNode


def test_identity():
    alias = Alias(name="nv", command="node -v", frequency=3, description="node version")

    assert alias.identity == ("nv", "node -v")


def test_is_same__ignores_metadata():
    assert Alias("nv", "node -v", frequency=3).is_same(Alias("nv", "node -v", description="x"))


def test_is_same__name_or_command_changes_identity():
    alias = Alias("nv", "node -v")

    assert not alias.is_same(Alias("nvv", "node -v"))
    assert not alias.is_same(Alias("nv", "node --version"))


def test_dict_round_trip():
    alias = Alias(name="nv", command="node -v", frequency=2, description="version")

    assert Alias.from_dict(alias.to_dict()) == alias


def test_from_dict__missing_metadata():
    alias = Alias.from_dict({"name": "nv", "command": "node -v", "frequency": None})

    assert alias.frequency == 0
    assert alias.description == ""


def test_str():
    assert str(Alias("nv", "node -v")) == "nv='node -v'"


def test_nodes():
    node = GroupNode(name=SYSTEM_GROUP, children=[AliasNode(group=SYSTEM_GROUP, alias=Alias("a", "b"))])

    assert node.is_system
    assert node.children[0].is_system
    assert not GroupNode(name="work").is_system
