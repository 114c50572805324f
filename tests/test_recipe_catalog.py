import json
import tempfile
import unittest
from pathlib import Path

from recipe_catalog import DEFAULT_RECIPE_DEFINITIONS, load_recipe_catalog

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


class RecipeCatalogTests(unittest.TestCase):
    def test_repository_recipe_catalog_is_normalized(self):
        catalog = load_recipe_catalog(DATA_DIR / "recipes.json")

        self.assertIn("uox_fresh", catalog)
        self.assertIn("uox_spent", catalog)
        for recipe in catalog.values():
            self.assertAlmostEqual(1.0, sum(recipe["composition"].values()))
            self.assertIn(recipe["basis"], ("mass", "atom"))

    def test_loads_defaults_when_file_missing(self):
        catalog = load_recipe_catalog(Path("does_not_exist.json"))
        self.assertEqual(set(DEFAULT_RECIPE_DEFINITIONS), set(catalog))
        self.assertAlmostEqual(0.04, catalog["uox_fresh"]["composition"]["U235"])

    def test_loads_defaults_for_malformed_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text("{not json")
            catalog = load_recipe_catalog(path)

        self.assertEqual(set(DEFAULT_RECIPE_DEFINITIONS), set(catalog))

    def test_normalizes_fractions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text(json.dumps({"natural_u": {"composition": {"U235": 7, "U238": 993}}}))
            catalog = load_recipe_catalog(path)

        self.assertEqual(["natural_u"], list(catalog))
        self.assertAlmostEqual(0.007, catalog["natural_u"]["composition"]["U235"])
        self.assertEqual("natural_u", catalog["natural_u"]["display_name"])
        self.assertEqual("mass", catalog["natural_u"]["basis"])

    def test_filters_invalid_entries(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text(
                json.dumps(
                    {
                        "valid": {"display_name": "Valid", "composition": {"U238": 1.0}},
                        "negative": {"composition": {"U235": -0.1, "U238": 1.1}},
                        "empty": {"composition": {}},
                        "bad_basis": {"basis": "volume", "composition": {"U238": 1.0}},
                        "bad_nuclide": {"composition": {"uranium": 1.0}},
                        "Bad-Key": {"composition": {"U238": 1.0}},
                        "not_a_dict": [1, 2, 3],
                    }
                )
            )
            catalog = load_recipe_catalog(path)

        self.assertEqual(["valid"], list(catalog))

    def test_accepts_atom_basis_and_zaid_nuclides(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "recipes.json"
            path.write_text(json.dumps({"heu": {"basis": "Atom", "composition": {"92235": 0.9, "92238": 0.1}}}))
            catalog = load_recipe_catalog(path)

        self.assertEqual("atom", catalog["heu"]["basis"])
        self.assertAlmostEqual(0.9, catalog["heu"]["composition"]["92235"])


if __name__ == "__main__":
    unittest.main()
