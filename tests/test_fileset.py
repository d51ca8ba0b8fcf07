from itertools import permutations

from artifactory_resource.modules.files import Category, FileSet


def names(file_set):
    return [file.name for file in file_set]


def test_orders_primary_pom_metadata_then_additional(tmp_path):
    files = [tmp_path / name for name in ("foo-sources.jar", "maven-metadata.xml", "foo.pom", "foo.jar")]

    file_set = FileSet.of(files)

    assert names(file_set) == ["foo.jar", "foo.pom", "maven-metadata.xml", "foo-sources.jar"]
    assert file_set.category(tmp_path / "foo.jar") is Category.PRIMARY
    assert file_set.category(tmp_path / "foo.pom") is Category.POM
    assert file_set.category(tmp_path / "maven-metadata.xml") is Category.MAVEN_METADATA
    assert file_set.category(tmp_path / "foo-sources.jar") is Category.ADDITIONAL


def test_order_is_independent_of_input_order(tmp_path):
    files = [
        tmp_path / "a" / "foo.jar",
        tmp_path / "a" / "foo.pom",
        tmp_path / "a" / "foo.jar.asc",
        tmp_path / "a" / "foo-javadoc.jar",
        tmp_path / "b" / "bar.zip",
        tmp_path / "b" / "maven-metadata-local.xml",
    ]
    expected = names(FileSet.of(files))

    for ordering in permutations(files):
        assert names(FileSet.of(ordering)) == expected


def test_iteration_is_repeatable(tmp_path):
    file_set = FileSet.of([tmp_path / "foo.pom", tmp_path / "foo.jar"])

    assert list(file_set) == list(file_set)
    assert len(file_set) == 2


def test_root_tie_break_picks_first_name(tmp_path):
    for ordering in ([tmp_path / "ba.zip", tmp_path / "ab.jar"], [tmp_path / "ab.jar", tmp_path / "ba.zip"]):
        file_set = FileSet.of(ordering)

        assert file_set.category(tmp_path / "ab.jar") is Category.PRIMARY
        assert file_set.category(tmp_path / "ba.zip") is Category.ADDITIONAL


def test_root_ignores_hidden_and_checksum_files(tmp_path):
    file_set = FileSet.of([tmp_path / ".ab.jar", tmp_path / "f.sha1", tmp_path / "g.md5", tmp_path / "foo.jar"])

    assert file_set.category(tmp_path / "foo.jar") is Category.PRIMARY
    assert file_set.category(tmp_path / ".ab.jar") is Category.ADDITIONAL


def test_signature_and_metadata_categories(tmp_path):
    file_set = FileSet.of([tmp_path / "foo.jar.asc", tmp_path / "MAVEN-METADATA.XML.sha1", tmp_path / "foo.jar"])

    assert file_set.category(tmp_path / "foo.jar.asc") is Category.SIGNATURE
    assert file_set.category(tmp_path / "MAVEN-METADATA.XML.sha1") is Category.MAVEN_METADATA


def test_pom_extension_wins_over_root_name(tmp_path):
    file_set = FileSet.of([tmp_path / "maven-metadata.xml", tmp_path / "foo.pom"])

    assert [file_set.category(file) for file in file_set] == [Category.POM, Category.MAVEN_METADATA]


def test_parent_directory_orders_first(tmp_path):
    files = [tmp_path / "b" / "bar.jar", tmp_path / "a" / "foo.pom", tmp_path / "a" / "foo.jar"]

    assert [file.relative_to(tmp_path).as_posix() for file in FileSet.of(files)] == [
        "a/foo.jar",
        "a/foo.pom",
        "b/bar.jar",
    ]


def test_batched_by_category_omits_empty_categories(tmp_path):
    files = [tmp_path / name for name in ("foo-sources.jar", "maven-metadata.xml", "foo.pom", "foo.jar", "foo-docs.zip")]

    batches = FileSet.of(files).batched_by_category()

    assert list(batches) == [Category.PRIMARY, Category.POM, Category.MAVEN_METADATA, Category.ADDITIONAL]
    assert [file.name for file in batches[Category.ADDITIONAL]] == ["foo-sources.jar", "foo-docs.zip"]


def test_filter_keeps_roots_and_order(tmp_path):
    files = [tmp_path / name for name in ("foo-sources.jar", "foo.pom", "foo.jar")]

    filtered = FileSet.of(files).filter(lambda file: file.suffix != ".pom")

    assert names(filtered) == ["foo.jar", "foo-sources.jar"]
    assert filtered.category(tmp_path / "foo.jar") is Category.PRIMARY


def test_category_priority_table():
    assert Category.ordered() == [
        Category.PRIMARY,
        Category.POM,
        Category.SIGNATURE,
        Category.MAVEN_METADATA,
        Category.ADDITIONAL,
    ]
