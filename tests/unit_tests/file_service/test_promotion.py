from pathlib import Path

import pytest

from storefront.errors import InvalidOperation
from storefront.file_service.work_area import FileApplicationType
from tests.consts import TEST_FILE_CONTENT


def test_promotes_every_file_in_work_area(file_service, recording_provider):
    work_area = file_service.initialize_work_area()
    (work_area.root_path / "a").mkdir()
    (work_area.root_path / "a" / "b.txt").write_bytes(TEST_FILE_CONTENT)
    (work_area.root_path / "c.txt").write_bytes(TEST_FILE_CONTENT)
    (work_area.root_path / "empty").mkdir()

    file_service.add_or_update_resources(work_area)

    assert len(recording_provider.batches) == 1
    assert sorted(recording_provider.batches[0]) == ["a/b.txt", "c.txt"]


def test_promotes_selected_files_in_one_batch(file_service, recording_provider):
    work_area = file_service.initialize_work_area()
    small = work_area.root_path / "small.png"
    large = work_area.root_path / "large.png"
    skipped = work_area.root_path / "original.png"
    for path in (small, large, skipped):
        path.write_bytes(TEST_FILE_CONTENT)

    file_service.add_or_update_resources(work_area, [small, str(large)])

    assert recording_provider.batches == [["small.png", "large.png"]]


def test_add_or_update_resource_promotes_single_file(file_service, recording_provider):
    work_area = file_service.initialize_work_area()
    sitemap = work_area.root_path / "sitemap.xml"
    sitemap.write_text("<urlset/>")

    file_service.add_or_update_resource(work_area, sitemap)

    assert recording_provider.batches == [["sitemap.xml"]]
    assert recording_provider.resources["sitemap.xml"] == b"<urlset/>"


def test_file_outside_work_area_is_rejected(file_service, recording_provider, tmp_path):
    work_area = file_service.initialize_work_area()
    inside = work_area.root_path / "inside.txt"
    inside.write_bytes(TEST_FILE_CONTENT)
    outside = tmp_path / "outside.txt"
    outside.write_bytes(TEST_FILE_CONTENT)

    with pytest.raises(InvalidOperation, match="not in provided work area"):
        file_service.add_or_update_resources(work_area, [inside, outside])

    assert recording_provider.batches == []


def test_sibling_directory_with_same_prefix_is_rejected(file_service, recording_provider, settings):
    work_area = file_service.initialize_work_area()
    sibling = Path(settings.temp_file_base_directory + "-other")
    sibling.mkdir()
    lookalike = sibling / "file.txt"
    lookalike.write_bytes(TEST_FILE_CONTENT)

    with pytest.raises(InvalidOperation):
        file_service.add_or_update_resource(work_area, lookalike)

    assert recording_provider.batches == []


def test_parent_traversal_is_rejected(file_service, recording_provider, tmp_path):
    work_area = file_service.initialize_work_area()
    escaped = tmp_path / "escaped.txt"
    escaped.write_bytes(TEST_FILE_CONTENT)

    with pytest.raises(InvalidOperation):
        file_service.add_or_update_resource(work_area, work_area.root_path / ".." / "escaped.txt")

    assert recording_provider.batches == []


def test_missing_file_is_rejected(file_service, recording_provider):
    work_area = file_service.initialize_work_area()
    present = work_area.root_path / "present.txt"
    present.write_bytes(TEST_FILE_CONTENT)

    with pytest.raises(InvalidOperation, match="does not exist"):
        file_service.add_or_update_resources(work_area, [present, work_area.root_path / "missing.txt"])

    assert recording_provider.batches == []


def test_get_and_remove_resource_use_default_provider(file_service, recording_provider):
    recording_provider.resources["images/logo.png"] = TEST_FILE_CONTENT

    stream = file_service.get_resource("/images/logo.png", FileApplicationType.IMAGE)

    assert stream.read() == TEST_FILE_CONTENT
    assert file_service.get_resource("images/missing.png") is None
    assert file_service.remove_resource("images/logo.png") is True
    assert file_service.remove_resource("images/logo.png") is False


def test_select_provider_always_returns_default(file_service, recording_provider):
    for application_type in FileApplicationType:
        assert file_service.select_provider(application_type) is recording_provider
    assert file_service.providers == [recording_provider]
