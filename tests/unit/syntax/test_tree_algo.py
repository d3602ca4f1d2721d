from cratenav.syntax import (
    SyntaxKind,
    ancestors_at_offset,
    ast,
    find_ancestor,
    find_node_at_offset,
    parse,
)

TEXT = "mod foo { mod bar { mod baz {} } }"


def test_tree_structure_and_navigation():
    tree = parse(TEXT, file_id=7)
    root = tree.root

    assert root.kind == SyntaxKind.SOURCE_FILE
    assert root.file_id == 7
    assert root.parent is None
    assert root.text == TEXT

    kinds = [node.kind for node in root.descendants()]
    assert kinds.count(SyntaxKind.MODULE) == 3
    assert kinds.count(SyntaxKind.ITEM_LIST) == 3
    assert kinds[0] == SyntaxKind.SOURCE_FILE


def test_nodes_compare_by_tree_and_index():
    tree = parse(TEXT)

    assert tree.node(1) == tree.node(1)
    assert hash(tree.node(1)) == hash(tree.node(1))
    assert tree.node(1) != tree.node(2)
    assert parse(TEXT).node(1) != tree.node(1)


def test_ancestors_at_offset_are_innermost_first():
    root = parse(TEXT).root
    offset = TEXT.index("baz")

    nodes = list(ancestors_at_offset(root, offset))
    lengths = [len(n.text_range) for n in nodes]

    assert lengths == sorted(lengths)
    assert nodes[-1] == root


def test_find_node_at_offset_picks_smallest_module():
    root = parse(TEXT).root

    module = find_node_at_offset(root, TEXT.index("baz") + 1, ast.Module)
    assert module.name().text == "baz"

    module = find_node_at_offset(root, TEXT.index("mod bar"), ast.Module)
    assert module.name().text == "bar"


def test_offsets_on_boundaries_touch_the_node():
    root = parse("mod a;").root

    assert find_node_at_offset(root, 0, ast.Module) is not None
    assert find_node_at_offset(root, len("mod a;"), ast.Module) is not None


def test_find_ancestor_with_skip():
    root = parse(TEXT).root
    baz = find_node_at_offset(root, TEXT.index("baz"), ast.Module)

    assert find_ancestor(baz.syntax, ast.Module).name().text == "baz"
    assert find_ancestor(baz.syntax, ast.Module, skip=1).name().text == "bar"
    assert find_ancestor(root, ast.Module) is None


def test_cast_checks_the_kind():
    root = parse(TEXT).root

    assert ast.Module.cast(root) is None
    assert ast.SourceFile.cast(root) is not None
    assert isinstance(ast.to_ast(root), ast.SourceFile)
