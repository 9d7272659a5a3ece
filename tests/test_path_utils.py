import pytest

from imageconv.exceptions import FileNameInvalidError
from imageconv.path_utils import check_file_name


@pytest.mark.parametrize("name", ["O'Brien.png", '"quoted".jpg', "$HOME/x.png"])
def test_check_file_name_rejects_illegal_characters(name):
    with pytest.raises(FileNameInvalidError) as exc_info:
        check_file_name(name)
    assert exc_info.value.file == name


def test_check_file_name_accepts_plain_names(tmp_path):
    assert check_file_name("normal-name.png") == "normal-name.png"
    assert check_file_name(tmp_path / "a b.png") == str(tmp_path / "a b.png")
