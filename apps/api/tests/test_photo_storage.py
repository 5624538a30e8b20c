import pytest

from services.photo_storage import LocalPhotoStorage, get_photo_storage, infer_extension
from services.report_photos import sanitize_filename


def test_store_and_retrieve_round_trip(tmp_path):
    storage = LocalPhotoStorage(str(tmp_path))

    locator = storage.store(b"image-bytes", "image/png", prefix="report-1")

    assert locator.startswith("report-1/")
    assert locator.endswith(".png")
    assert storage.retrieve(locator) == b"image-bytes"


def test_missing_locator_raises_file_not_found(tmp_path):
    storage = LocalPhotoStorage(str(tmp_path))
    with pytest.raises(FileNotFoundError):
        storage.retrieve("report-1/nothing.jpg")


@pytest.mark.parametrize("locator", ["../escape.jpg", "report/../../escape.jpg", "/etc/passwd"])
def test_locator_cannot_escape_root(tmp_path, locator):
    storage = LocalPhotoStorage(str(tmp_path / "root"))
    with pytest.raises(ValueError):
        storage.retrieve(locator)


def test_delete_is_quiet_for_missing_files(tmp_path):
    storage = LocalPhotoStorage(str(tmp_path))
    locator = storage.store(b"x", "image/jpeg", prefix="r")
    storage.delete(locator)
    storage.delete(locator)
    with pytest.raises(FileNotFoundError):
        storage.retrieve(locator)


def test_prefix_is_sanitized(tmp_path):
    storage = LocalPhotoStorage(str(tmp_path))
    locator = storage.store(b"x", "image/jpeg", prefix="../../etc")
    assert locator.startswith("etc/")
    assert (tmp_path / locator).is_file()


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("image/png", "png"),
        ("image/webp", "webp"),
        ("image/GIF", "gif"),
        ("image/jpeg", "jpg"),
        ("image/png; charset=binary", "png"),
        ("", "jpg"),
    ],
)
def test_infer_extension(content_type, expected):
    assert infer_extension(content_type) == expected


def test_default_storage_follows_upload_dir(isolated_upload_dir):
    storage = get_photo_storage()
    assert storage.root == isolated_upload_dir.resolve()


def test_sanitize_filename():
    assert sanitize_filename("../../secret/pic.png") == "pic.png"
    assert sanitize_filename('evil"name.jpg') == "evilname.jpg"
    assert sanitize_filename("사진.jpg") == ".jpg"
    assert sanitize_filename(None) == "photo.jpg"
    assert sanitize_filename("///") == "photo.jpg"
