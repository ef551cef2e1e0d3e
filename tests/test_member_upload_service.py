from Member_module.Member_upload_service import MemberImageStorageService

PNG_BYTES = b'\x89PNG\r\n\x1a\n'


def test_save_and_delete(storage):
    url = storage.save_image('Photo.PNG', PNG_BYTES)

    assert url.startswith('/uploads/members/') and url.endswith('.png')
    path = storage.resolve_local_path(url)
    assert path.read_bytes() == PNG_BYTES

    assert storage.delete_image(url) is True
    assert not path.exists()
    assert storage.delete_image(url) is False


def test_rejected_files_are_skipped(storage):
    assert storage.save_image('script.sh', PNG_BYTES) is None
    assert storage.save_image(None, PNG_BYTES) is None
    assert storage.save_image('empty.png', b'') is None
    assert storage.save_image('big.png', b'0' * (storage.max_file_size + 1)) is None


def test_only_own_files_resolve(storage):
    assert storage.resolve_local_path('https://cdn.test/a.png') is None
    assert storage.resolve_local_path('/uploads/members/../secret.png') is None
    assert storage.resolve_local_path('/uploads/members/.hidden') is None
    assert storage.resolve_local_path('') is None
    assert storage.delete_image(None) is False


def test_unwritable_directory_is_skipped(tmp_path):
    blocker = tmp_path / 'uploads'
    blocker.write_text('not a directory')
    storage = MemberImageStorageService(str(blocker), '/uploads', 1024)

    assert storage.save_image('a.png', PNG_BYTES) is None
