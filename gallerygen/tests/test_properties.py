"""Tests for PropertyExtractor class."""

import pytest

from gallerygen.errors import ExtractionError
from gallerygen.properties import Properties, PropertyExtractor


class TestProperties:
    """Tests for Properties class."""

    def test_get_core_keys(self, sample_properties):
        """Test width, height and format are exposed as strings."""
        assert sample_properties.get('width') == '4000'
        assert sample_properties.get('height') == '3000'
        assert sample_properties.get('format') == 'JPEG'

    def test_get_missing_key(self, sample_properties):
        """Test missing optional keys return None."""
        assert sample_properties.get('PixelXDimension') is None

    def test_get_int(self):
        """Test integer lookup tolerates non-numeric values."""
        props = Properties(100, 50, 'PNG', exif={'PixelXDimension': '100', 'Make': 'Canon'})

        assert props.get_int('PixelXDimension') == 100
        assert props.get_int('Make') is None
        assert props.get_int('PixelYDimension') is None

    def test_orientation_default(self, sample_properties):
        """Test orientation defaults to 1."""
        assert sample_properties.orientation == 1

    def test_megapixels(self, sample_properties):
        """Test megapixel computation."""
        assert sample_properties.megapixels == pytest.approx(12.0)


class TestPropertyExtractor:
    """Tests for PropertyExtractor class."""

    def test_extract_dimensions_and_format(self, make_image, logger):
        """Test basic properties of a JPEG."""
        path = make_image('photo.jpg', size=(320, 240))

        props = PropertyExtractor(logger=logger).extract(str(path))

        assert props.width == 320
        assert props.height == 240
        assert props.format == 'JPEG'

    def test_extract_exif_fields(self, make_image):
        """Test EXIF date and source dimensions are read by name."""
        path = make_image(
            'photo.jpg',
            date='2023:07:14 18:30:00',
            pixel_dims=(6000, 4000),
            orientation=6,
        )

        props = PropertyExtractor().extract(str(path))

        assert props.get('DateTimeOriginal') == '2023:07:14 18:30:00'
        assert props.get_int('PixelXDimension') == 6000
        assert props.get_int('PixelYDimension') == 4000
        assert props.orientation == 6

    def test_extract_png_without_exif(self, make_image):
        """Test images without EXIF have an empty tag set."""
        path = make_image('drawing.png', size=(50, 60))

        props = PropertyExtractor().extract(str(path))

        assert props.format == 'PNG'
        assert props.get('DateTimeOriginal') is None

    def test_extract_corrupt_file(self, tmp_path):
        """Test unreadable files raise ExtractionError naming the file."""
        path = tmp_path / 'broken.jpg'
        path.write_bytes(b'not an image')

        with pytest.raises(ExtractionError) as excinfo:
            PropertyExtractor().extract(str(path))

        assert excinfo.value.path == str(path)
        assert 'broken.jpg' in str(excinfo.value)

    def test_extract_missing_file(self, tmp_path):
        """Test missing files raise ExtractionError."""
        with pytest.raises(ExtractionError):
            PropertyExtractor().extract(str(tmp_path / 'missing.jpg'))
