"""Tests for GalleryBuilder class."""

import json

import pytest
from PIL import Image

from gallerygen.build_progress import BuildProgress
from gallerygen.builder import GalleryBuilder
from gallerygen.errors import EmptyInputError, ExtractionError, TransformError


class TestGalleryBuilder:
    """Tests for GalleryBuilder class."""

    def test_discover(self, gallery_config, make_image, input_dir):
        """Test only supported images are discovered, sorted by name."""
        make_image('b.JPG')
        make_image('a.png')
        make_image('c.tiff')
        (input_dir / 'notes.txt').write_text('skip me')
        (input_dir / 'sub.jpg').mkdir()

        sources = GalleryBuilder(gallery_config).discover()

        assert [s.rsplit('/', 1)[-1] for s in sources] == ['a.png', 'b.JPG', 'c.tiff']

    def test_empty_input(self, gallery_config):
        """Test an empty input directory is an error."""
        with pytest.raises(EmptyInputError):
            GalleryBuilder(gallery_config).build()

    def test_end_to_end(self, gallery_config, make_image, output_dir, logger):
        """Test a 3-image gallery is ordered by ascending stamp."""
        gallery_config.auto_panorama = False
        make_image('a.jpg', date='2024:06:03 09:00:00')
        make_image('b.jpg')
        make_image('c.jpg', date='2024:06:01 09:00:00')

        manifest = GalleryBuilder(gallery_config, logger=logger).build()

        with open(output_dir / 'data.json') as f:
            data = json.load(f)
        assert data == manifest.to_dict()
        assert len(data['data']) == 3
        for entry in data['data']:
            assert {'img', 'thumb', 'blur', 'stamp'} <= set(entry)
            assert 'file' not in entry
        stamps = [entry['stamp'] for entry in data['data']]
        assert stamps == sorted(stamps)
        assert [entry['img'][0] for entry in data['data']] == ['imgs/b.jpg', 'imgs/c.jpg', 'imgs/a.jpg']
        assert data['download'] == 'gallery.zip'
        assert data['thumb'] == [267, 200]
        assert data['blur'] == [500, 500]

    def test_parallel_build_matches_sequential(self, gallery_config, make_image, tmp_path):
        """Test names and stamps do not depend on the worker count."""
        for i in range(6):
            make_image(f'img{i}.jpg', size=(200 + i * 10, 150))
        make_image('img0!.jpg')

        gallery_config.workers = 4
        parallel = GalleryBuilder(gallery_config).build().to_dict()

        gallery_config.workers = 1
        gallery_config.output_dir = str(tmp_path / 'sequential')
        sequential = GalleryBuilder(gallery_config).build().to_dict()

        assert parallel['data'] == sequential['data']
        names = [entry['img'][0] for entry in parallel['data']]
        assert len(set(names)) == 7
        assert 'imgs/img0_0.jpg' in names

    def test_panorama_kept_end_to_end(self, gallery_config, make_image, output_dir):
        """Test only the above-average panorama keeps its original."""
        make_image('pano.jpg', size=(2400, 600))
        make_image('small1.jpg', size=(400, 300))
        make_image('small2.jpg', size=(400, 300))

        manifest = GalleryBuilder(gallery_config).build()

        kept = [e.name for e in manifest.entries if e.file is not None]
        assert kept == ['pano']
        assert (output_dir / 'files' / 'pano.jpg').exists()
        assert not (output_dir / 'files' / 'small1.jpg').exists()

    def test_cropped_panorama_discarded_end_to_end(self, gallery_config, make_image, output_dir):
        """Test a wide crop of a larger camera frame does not keep its original."""
        make_image('pano.jpg', size=(2400, 600), pixel_dims=(12000, 4000))
        make_image('small.jpg', size=(400, 300))

        manifest = GalleryBuilder(gallery_config).build()

        pano = next(e for e in manifest.entries if e.name == 'pano')
        assert pano.properties.get_int('PixelXDimension') == 12000
        assert pano.file is None
        assert not (output_dir / 'files' / 'pano.jpg').exists()

    def test_slim_end_to_end(self, gallery_config, make_image, output_dir):
        """Test slim builds keep no originals and no download."""
        gallery_config.slim = True
        make_image('pano.jpg', size=(2400, 600))
        make_image('small.jpg', size=(400, 300))

        data = GalleryBuilder(gallery_config).build().to_dict()

        assert 'download' not in data
        assert all('file' not in entry for entry in data['data'])
        assert list((output_dir / 'files').iterdir()) == []

    def test_extraction_failure_aborts(self, gallery_config, make_image, input_dir, output_dir):
        """Test a corrupt source aborts the run without a manifest."""
        make_image('good.jpg')
        (input_dir / 'bad.jpg').write_bytes(b'garbage')

        with pytest.raises(ExtractionError) as excinfo:
            GalleryBuilder(gallery_config).build()

        assert excinfo.value.path.endswith('bad.jpg')
        assert not (output_dir / 'data.json').exists()

    def test_transform_failure_aborts(self, gallery_config, make_image, output_dir, mocker):
        """Test a derivative failure aborts the run without a manifest."""
        make_image('a.jpg')
        make_image('b.jpg')
        builder = GalleryBuilder(gallery_config)
        mocker.patch.object(
            builder.generator, 'generate', side_effect=TransformError('boom', path='b.jpg')
        )

        with pytest.raises(TransformError):
            builder.build()

        assert not (output_dir / 'data.json').exists()

    def test_stats_and_progress(self, gallery_config, make_image, capsys):
        """Test statistics are collected and progress reported per file."""
        gallery_config.keep_originals = True
        make_image('a.jpg')
        make_image('b.jpg')
        builder = GalleryBuilder(gallery_config)

        manifest = builder.build(progress=BuildProgress(show_files=True))

        assert builder.stats.total_to_process == 2
        assert builder.stats.extracted == 2
        assert builder.stats.processed == 2
        assert builder.stats.bytes_generated > 0
        assert manifest.total_originals == 2
        assert capsys.readouterr().out.count('[OK]') == 2

    def test_pixel_limit_rejects_larger_sources(self, gallery_config, make_image, monkeypatch):
        """Test sources far beyond the configured pixel limit fail extraction."""
        monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', Image.MAX_IMAGE_PIXELS)
        gallery_config.max_image_pixels = 5000
        make_image('big.jpg', size=(200, 100))

        with pytest.raises(ExtractionError):
            GalleryBuilder(gallery_config).build()

    def test_pixel_limit_replaces_pillow_guard(self, gallery_config, make_image, monkeypatch):
        """Test images above Pillow's own guard build when the limit is lifted."""
        monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 10_000)
        gallery_config.max_image_pixels = None
        make_image('wide.jpg', size=(300, 100))

        manifest = GalleryBuilder(gallery_config).build()

        assert manifest.total_images == 1
        assert Image.MAX_IMAGE_PIXELS is None
