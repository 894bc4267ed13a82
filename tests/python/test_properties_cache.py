import unittest

import pymatrix
from pymatrix._internal import properties as _properties


def _m(rows):
    return pymatrix.matrix(rows)


class TestPropertiesMutationInvalidation(unittest.TestCase):
    def test_trace_cache_is_cleared_on_set(self):
        m = pymatrix.create(2, 2)
        m.set(0, 0, 1.0)
        m.set(1, 1, 2.0)

        self.assertEqual(m.trace(), 3.0)
        self.assertEqual(m.properties.get("trace"), 3.0)

        m.set(0, 0, 100.0)
        self.assertNotIn("trace", m.properties)
        self.assertEqual(m.trace(), 102.0)

    def test_determinant_cache_is_cleared_on_set(self):
        m = pymatrix.create(2, 2)
        m.set(0, 0, 1.0)
        m.set(1, 1, 2.0)

        self.assertEqual(m.determinant(), 2.0)
        self.assertEqual(m.properties.get("determinant"), 2.0)

        m.set(0, 0, 3.0)
        self.assertNotIn("determinant", m.properties)
        self.assertEqual(m.determinant(), 6.0)

    def test_identity_flag_cleared_on_set(self):
        m = pymatrix.identity(3)
        self.assertTrue(pymatrix.is_identity(m))
        m.set(0, 1, 5)
        self.assertNotIn("is_identity", m.properties)
        self.assertFalse(pymatrix.is_identity(m))
        self.assertFalse(pymatrix.is_symmetric(m))
        self.assertTrue(pymatrix.is_upper_triangular(m))

    def test_scalar_ops_clear_derived_values(self):
        m = _m([[1, 2], [3, 4]])
        self.assertEqual(pymatrix.determinant(m), -2)
        pymatrix.scalar_multiply(m, 2)
        self.assertNotIn("determinant", m.properties)
        self.assertEqual(pymatrix.determinant(m), -8)

        pymatrix.scalar_add(m, 1)
        self.assertNotIn("determinant", m.properties)
        self.assertEqual(pymatrix.trace(m), 12)

    def test_fill_clears_derived_values(self):
        m = pymatrix.create(2, 2)
        self.assertTrue(pymatrix.is_null(m))
        m.fill(0.5)
        self.assertNotIn("is_null", m.properties)
        self.assertTrue(pymatrix.is_doubly_stochastic(m))

    def test_shape_keys_survive_mutation(self):
        m = pymatrix.create(2, 2)
        self.assertTrue(pymatrix.is_square(m))
        self.assertTrue(pymatrix.is_null(m))
        m.set(0, 0, 1.0)
        self.assertIs(m.properties.get("is_square"), True)
        self.assertNotIn("is_null", m.properties)

    def test_payload_epoch_counts_mutations(self):
        m = pymatrix.create(2, 2)
        before = _properties.payload_epoch(m)
        m.set(0, 0, 1.0)
        m.fill(2.0)
        self.assertEqual(_properties.payload_epoch(m), before + 2)


class TestPropertiesValidation(unittest.TestCase):
    def test_shape_contradiction_rejected(self):
        m = pymatrix.create(2, 2)
        with self.assertRaises(ValueError):
            m.properties["is_square"] = False
        self.assertNotIn("is_square", m.properties)

    def test_square_only_flag_on_rectangular(self):
        m = pymatrix.create(2, 3)
        with self.assertRaises(ValueError):
            m.properties["is_identity"] = True
        with self.assertRaises(ValueError):
            m.properties = {"determinant": 0}

    def test_internal_contradictions(self):
        m = pymatrix.create(2, 2)
        with self.assertRaises(ValueError):
            m.properties = {"is_singular": True, "is_invertible": True}
        with self.assertRaises(ValueError):
            m.properties = {"is_identity": True, "is_diagonal": False}
        with self.assertRaises(ValueError):
            m.properties = {"nilpotency_degree": 2, "is_nilpotent": False}

    def test_failed_update_reverts(self):
        m = pymatrix.create(2, 2)
        m.properties["is_singular"] = True
        with self.assertRaises(ValueError):
            m.properties["is_invertible"] = True
        self.assertNotIn("is_invertible", m.properties)
        self.assertIs(m.properties["is_singular"], True)

    def test_keys_must_be_strings(self):
        m = pymatrix.create(1, 1)
        with self.assertRaises(TypeError):
            m.properties[1] = True
        with self.assertRaises(TypeError):
            m.properties = [("is_square", True)]


class TestPropertiesCopy(unittest.TestCase):
    def test_copy_has_independent_cache(self):
        m = _m([[1, 2], [3, 4]])
        pymatrix.determinant(m)
        c = m.copy()
        self.assertEqual(c.properties.get("determinant"), -2)

        c.set(0, 0, 0)
        self.assertNotIn("determinant", c.properties)
        self.assertEqual(m.properties.get("determinant"), -2)


class TestEffectiveStructure(unittest.TestCase):
    def test_priority(self):
        self.assertEqual(_properties.effective_structure_from_properties({}), "general")
        self.assertEqual(
            _properties.effective_structure_from_properties({"is_null": True, "is_identity": True}),
            "zero",
        )
        self.assertEqual(
            _properties.effective_structure_from_properties(
                {"is_upper_triangular": True, "is_lower_triangular": True}
            ),
            "diagonal",
        )
        self.assertEqual(
            _properties.effective_structure_from_properties({"is_lower_triangular": True}),
            "lower_triangular",
        )

    def test_identity_factory_structure(self):
        self.assertEqual(pymatrix.effective_structure(pymatrix.identity(3)), "identity")


if __name__ == "__main__":
    unittest.main()
