import unittest
import warnings

import numpy as np

import pymatrix


def _m(rows, dtype=None):
    return pymatrix.matrix(rows, dtype=dtype)


class TestDeterminant(unittest.TestCase):
    def test_identity(self):
        for n in (1, 2, 3, 5):
            self.assertEqual(pymatrix.determinant(pymatrix.identity(n)), 1)
            # Same elements, no precomputed properties.
            plain = _m(pymatrix.identity(n).tolist())
            self.assertEqual(pymatrix.determinant(plain), 1)

    def test_singular_2x2(self):
        m = _m([[1, 2], [2, 4]])
        self.assertEqual(pymatrix.determinant(m), 0)
        self.assertTrue(pymatrix.is_singular(m))
        self.assertFalse(pymatrix.is_invertible(m))

    def test_integer_result_is_exact_int(self):
        m = _m([[2, -3, 1], [2, 0, -1], [1, 4, 5]])
        det = pymatrix.determinant(m)
        self.assertIsInstance(det, int)
        self.assertEqual(det, 49)

    def test_integer_elimination_needs_row_swap(self):
        m = _m([[0, 1], [1, 0]])
        self.assertEqual(pymatrix.determinant(m), -1)

    def test_large_integers_stay_exact(self):
        big = 2**31 - 1
        m = _m([[big, 1], [1, big]])
        self.assertEqual(pymatrix.determinant(m), big * big - 1)

    def test_float_matches_numpy(self):
        rows = [[4.0, 3.0, 2.0], [1.0, 5.0, 7.0], [2.0, 8.0, 1.5]]
        det = pymatrix.determinant(_m(rows))
        self.assertIsInstance(det, float)
        self.assertAlmostEqual(det, float(np.linalg.det(np.array(rows))), places=9)

    def test_float_partial_pivoting(self):
        self.assertEqual(pymatrix.determinant(_m([[0.0, 1.0], [1.0, 0.0]])), -1.0)
        self.assertEqual(pymatrix.determinant(_m([[0.0, 0.0], [1.0, 2.0]])), 0.0)

    def test_singleton(self):
        self.assertEqual(pymatrix.determinant(_m([[7]])), 7)

    def test_cofactor_agrees_with_elimination(self):
        rows = [[2, -3, 1, 4], [2, 0, -1, 3], [1, 4, 5, -2], [0, 1, 1, 1]]
        elimination = pymatrix.determinant(_m(rows), method="elimination")
        cofactor = pymatrix.determinant(_m(rows), method="cofactor")
        self.assertEqual(elimination, cofactor)

    def test_cofactor_warns_for_large_input(self):
        m = _m(pymatrix.identity(9).tolist())
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            det = pymatrix.determinant(m, method="cofactor")

        self.assertEqual(det, 1)
        self.assertTrue(any(issubclass(item.category, pymatrix.PyMatrixPerformanceWarning) for item in w))

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            pymatrix.determinant(_m([[1, 2], [3, 4]]), method="lu")

    def test_not_square(self):
        with self.assertRaises(pymatrix.NotSquareError):
            pymatrix.determinant(pymatrix.create(2, 3))
        with self.assertRaises(ValueError):
            pymatrix.create(3, 2).determinant()

    def test_result_is_memoized(self):
        m = _m([[1, 2], [3, 4]])
        self.assertEqual(m.determinant(), -2)
        self.assertEqual(m.properties.get("determinant"), -2)

    def test_cached_triangular_shortcut(self):
        m = _m([[2, 5], [0, 3]])
        self.assertTrue(pymatrix.is_upper_triangular(m))
        self.assertEqual(pymatrix.effective_structure(m), "upper_triangular")
        self.assertEqual(pymatrix.determinant(m), 6)


class TestTrace(unittest.TestCase):
    def test_trace(self):
        self.assertEqual(pymatrix.trace(_m([[1, 2], [3, 4]])), 5)
        self.assertEqual(pymatrix.trace(_m([[1.5, 0.0], [0.0, 2.0]])), 3.5)
        self.assertEqual(pymatrix.identity(4).trace(), 4)

    def test_not_square(self):
        with self.assertRaises(pymatrix.NotSquareError):
            pymatrix.trace(pymatrix.create(1, 2))


class TestTrivialEigen(unittest.TestCase):
    def test_identity_eigenvalues(self):
        self.assertEqual(pymatrix.eigenvalues_trivial(pymatrix.identity(3)), [1.0, 1.0, 1.0])

    def test_identity_eigenvectors(self):
        vectors = pymatrix.eigenvectors_trivial(pymatrix.identity(3))
        self.assertEqual(vectors.dtype, "float64")
        self.assertTrue(pymatrix.is_identity(vectors))

    def test_eigenvectors_are_not_shared(self):
        m = pymatrix.identity(2)
        first = pymatrix.eigenvectors_trivial(m)
        first.set(0, 0, 5.0)
        self.assertEqual(pymatrix.eigenvectors_trivial(m).at(0, 0), 1.0)

    def test_general_matrix_not_implemented(self):
        m = _m([[2, 0], [0, 3]])
        with self.assertRaises(pymatrix.EigenNotImplementedError):
            pymatrix.eigenvalues_trivial(m)
        with self.assertRaises(NotImplementedError):
            pymatrix.eigenvectors_trivial(m)

    def test_not_square(self):
        with self.assertRaises(pymatrix.NotSquareError):
            pymatrix.eigenvalues_trivial(pymatrix.create(2, 3))


if __name__ == "__main__":
    unittest.main()
