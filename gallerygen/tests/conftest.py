"""
Pytest fixtures for gallerygen tests.
"""

import pytest

from PIL import Image

TAG_ORIENTATION = 0x0112
TAG_DATETIME_ORIGINAL = 0x9003
TAG_PIXEL_X = 0xA002
TAG_PIXEL_Y = 0xA003


@pytest.fixture
def make_image(tmp_path):
    """Fixture providing a factory that writes test images to disk."""
    def _make(
        filename='image.jpg',
        size=(400, 300),
        color='red',
        date=None,
        pixel_dims=None,
        orientation=None,
        directory=None,
        mode='RGB',
    ):
        directory = directory or tmp_path / 'input'
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename

        img = Image.new(mode, size, color=color)
        exif = Image.Exif()
        if date is not None:
            exif[TAG_DATETIME_ORIGINAL] = date
        if pixel_dims is not None:
            exif[TAG_PIXEL_X] = pixel_dims[0]
            exif[TAG_PIXEL_Y] = pixel_dims[1]
        if orientation is not None:
            exif[TAG_ORIENTATION] = orientation

        if path.suffix.lower() in ('.jpg', '.jpeg'):
            img.save(path, format='JPEG', exif=exif)
        else:
            img.save(path)
        return path

    return _make


@pytest.fixture
def input_dir(tmp_path):
    """Fixture providing an empty input directory."""
    path = tmp_path / 'input'
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture
def output_dir(tmp_path):
    """Fixture providing the gallery output directory (not yet created)."""
    return tmp_path / 'gallery'


@pytest.fixture
def gallery_config(input_dir, output_dir):
    """Fixture providing a gallery configuration with a single worker."""
    from gallerygen.config import GalleryConfig

    return GalleryConfig(
        input_dir=str(input_dir),
        output_dir=str(output_dir),
        workers=1,
    )


@pytest.fixture
def sample_properties():
    """Fixture providing properties of a dated 4000x3000 JPEG."""
    from gallerygen.properties import Properties

    return Properties(
        width=4000,
        height=3000,
        format='JPEG',
        exif={'DateTimeOriginal': '2024:06:01 12:00:00'},
    )


@pytest.fixture
def make_entry():
    """Fixture providing a factory for generated gallery entries."""
    from gallerygen.gallery_entry import Derivative, GalleryEntry
    from gallerygen.properties import Properties

    def _make(
        name='image',
        index=0,
        stamp=1,
        date=None,
        size=(4000, 3000),
        exif=None,
    ):
        return GalleryEntry(
            index=index,
            source=f'/photos/{name}.jpg',
            name=name,
            properties=Properties(width=size[0], height=size[1], format='JPEG', exif=exif or {}),
            stamp=stamp,
            date=date,
            img=Derivative('full', f'imgs/{name}.jpg', 1600, 1200),
            thumb=Derivative('thumb', f'thumbs/{name}.jpg', 267, 200),
            blur=Derivative('blur', f'blurs/{name}.jpg', 500, 500),
            file=Derivative('original', f'files/{name}.jpg', size[0], size[1]),
        )

    return _make


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
