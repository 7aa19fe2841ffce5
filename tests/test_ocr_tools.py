from __future__ import annotations

import unittest
from unittest.mock import patch

import pytesseract
from PIL import Image

from ocr_fakes import tesseract_data
from rock_scanner.config import OcrTesseractConfig
from rock_scanner.errors import EncodingError, OcrError
from rock_scanner.geometry import PixelRect
from rock_scanner.hud_config import OCR_WHITELIST
from rock_scanner.ocr_tools import (
    TesseractClient,
    encode_png,
    group_lines,
    preprocess_for_tesseract,
    tesseract_config,
)


class GroupLinesTests(unittest.TestCase):
    def test_words_merge_into_lines(self) -> None:
        data = tesseract_data(
            [
                ([("ASTEROID", 5, 60), ("(C-TYPE)", 70, 50)], 92.0, 10),
                ([("MASS:", 5, 40), ("4500", 50, 30)], 80.0, 30),
            ]
        )
        lines = group_lines(data)
        self.assertEqual([line.text for line in lines], ["ASTEROID (C-TYPE)", "MASS: 4500"])
        self.assertEqual(lines[0].box, PixelRect(5, 10, 120, 24))
        self.assertEqual(lines[1].box, PixelRect(5, 30, 80, 44))
        self.assertAlmostEqual(lines[1].confidence, 80.0)
        self.assertAlmostEqual(lines[1].ratio, 0.8)

    def test_confidence_is_mean_of_words(self) -> None:
        data = tesseract_data([([("SCAN", 0, 30)], 90.0, 0)])
        data["text"].append("RESULTS")
        data["conf"].append("60")
        for key, value in (
            ("level", 5), ("block_num", 1), ("par_num", 1), ("line_num", 1),
            ("word_num", 2), ("left", 40), ("top", 0), ("width", 50), ("height", 14),
        ):
            data[key].append(value)
        (line,) = group_lines(data)
        self.assertEqual(line.text, "SCAN RESULTS")
        self.assertAlmostEqual(line.confidence, 75.0)

    def test_blank_and_negative_tokens_dropped(self) -> None:
        data = tesseract_data([([("  ", 0, 10)], 90.0, 0), ([("MASS:", 0, 10)], -1, 20)])
        self.assertEqual(group_lines(data), [])

    def test_boxes_mapped_back_from_scale(self) -> None:
        data = tesseract_data([([("MASS:", 20, 80)], 90.0, 40)], height=28)
        (line,) = group_lines(data, scale=2.0)
        self.assertEqual(line.box, PixelRect(10, 20, 50, 34))


class PreprocessTests(unittest.TestCase):
    def test_scale_and_grayscale(self) -> None:
        image = Image.new("RGB", (40, 20), (200, 30, 30))
        settings = OcrTesseractConfig(scale=2.0)
        processed = preprocess_for_tesseract(image, settings)
        self.assertEqual(processed.size, (80, 40))
        self.assertEqual(processed.mode, "L")

    def test_otsu_binarizes(self) -> None:
        image = Image.new("RGB", (40, 20), (10, 10, 10))
        image.paste((240, 240, 240), (10, 5, 30, 15))
        processed = preprocess_for_tesseract(image, OcrTesseractConfig(otsu=True))
        self.assertTrue(set(processed.getdata()) <= {0, 255})

    def test_config_quotes_whitelist(self) -> None:
        config = tesseract_config(OcrTesseractConfig(psm=6, oem=1), OCR_WHITELIST)
        self.assertIn("--psm 6 --oem 1", config)
        self.assertIn(f'tessedit_char_whitelist="{OCR_WHITELIST}"', config)
        self.assertNotIn("whitelist", tesseract_config(OcrTesseractConfig(), ""))


class TesseractClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.png = encode_png(Image.new("RGB", (120, 50), (0, 0, 0)))

    def test_word_boxes_from_engine(self) -> None:
        data = tesseract_data([([("MASS:", 5, 40), ("4500", 50, 30)], 90.0, 10)])
        with patch("pytesseract.image_to_data", return_value=data) as image_to_data:
            with TesseractClient(OcrTesseractConfig()) as client:
                client.set_whitelist(OCR_WHITELIST)
                client.set_image_from_bytes(self.png)
                boxes = client.word_boxes()
        self.assertEqual([box.text for box in boxes], ["MASS: 4500"])
        image = image_to_data.call_args.args[0]
        self.assertEqual(image.size, (120, 50))
        self.assertIn("tessedit_char_whitelist", image_to_data.call_args.kwargs["config"])

    def test_close_releases_image(self) -> None:
        client = TesseractClient(OcrTesseractConfig())
        client.set_image_from_bytes(self.png)
        client.close()
        with self.assertRaises(OcrError):
            client.word_boxes()

    def test_undecodable_bytes(self) -> None:
        with TesseractClient(OcrTesseractConfig()) as client:
            with self.assertRaises(EncodingError):
                client.set_image_from_bytes(b"not a png")

    def test_engine_failure_wrapped(self) -> None:
        error = pytesseract.TesseractError(1, "boom")
        with patch("pytesseract.image_to_data", side_effect=error):
            with TesseractClient(OcrTesseractConfig()) as client:
                client.set_image_from_bytes(self.png)
                with self.assertRaises(OcrError):
                    client.word_boxes()

    def test_tesseract_cmd_override(self) -> None:
        original = pytesseract.pytesseract.tesseract_cmd
        try:
            TesseractClient(OcrTesseractConfig(tesseract_cmd="/opt/tesseract/bin/tesseract"))
            self.assertEqual(pytesseract.pytesseract.tesseract_cmd, "/opt/tesseract/bin/tesseract")
        finally:
            pytesseract.pytesseract.tesseract_cmd = original


if __name__ == "__main__":
    unittest.main()
