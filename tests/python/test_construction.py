import unittest
import warnings

import numpy as np

import pymatrix


class TestCreate(unittest.TestCase):
    def test_create_is_zero_filled(self):
        m = pymatrix.create(2, 3)
        self.assertEqual(m.shape, (2, 3))
        self.assertEqual(m.rows, 2)
        self.assertEqual(m.cols, 3)
        self.assertEqual(m.dtype, "float64")
        self.assertEqual(m.tolist(), [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])

    def test_create_with_dtype_token(self):
        m = pymatrix.create(2, 2, dtype=pymatrix.int64)
        self.assertEqual(m.dtype, "int64")
        m = pymatrix.create(2, 2, dtype=np.float32)
        self.assertEqual(m.dtype, "float32")

    def test_non_positive_dimensions_rejected(self):
        for rows, cols in ((0, 3), (3, 0), (-1, 2)):
            with self.assertRaises(pymatrix.InvalidDimensionError):
                pymatrix.create(rows, cols)

    def test_invalid_dimension_is_value_error(self):
        with self.assertRaises(ValueError):
            pymatrix.create(0, 1)

    def test_bool_dimension_rejected(self):
        with self.assertRaises(pymatrix.InvalidDimensionError):
            pymatrix.create(True, 2)

    def test_unsupported_dtype_rejected(self):
        with self.assertRaises(TypeError):
            pymatrix.create(2, 2, dtype="complex128")

    def test_zeros_and_ones(self):
        self.assertTrue(pymatrix.is_null(pymatrix.zeros(2, 2)))
        m = pymatrix.ones(2, 3, dtype="int32")
        self.assertEqual(m.tolist(), [[1, 1, 1], [1, 1, 1]])


class TestFromArray(unittest.TestCase):
    def test_row_major_layout(self):
        m = pymatrix.from_array(2, 3, [1, 2, 3, 4, 5, 6])
        self.assertEqual(m.dtype, "int32")
        self.assertEqual(m.at(0, 2), 3)
        self.assertEqual(m.at(1, 0), 4)
        self.assertEqual(m.tolist(), [[1, 2, 3], [4, 5, 6]])

    def test_length_mismatch(self):
        with self.assertRaises(pymatrix.LengthMismatchError):
            pymatrix.from_array(2, 2, [1, 2, 3])
        with self.assertRaises(pymatrix.LengthMismatchError):
            pymatrix.from_array(1, 2, [1, 2, 3])

    def test_dtype_inference(self):
        self.assertEqual(pymatrix.from_array(1, 2, [1, 2.5]).dtype, "float64")
        self.assertEqual(pymatrix.from_array(1, 2, [1, 2**40]).dtype, "int64")
        self.assertEqual(pymatrix.from_array(1, 2, np.array([1, 2], dtype=np.int32)).dtype, "int32")

    def test_bool_elements_rejected(self):
        with self.assertRaises(TypeError):
            pymatrix.from_array(1, 2, [True, False])

    def test_truncation_warns(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            m = pymatrix.from_array(1, 2, [1.5, 2.0], dtype="int32")

        self.assertEqual(m.tolist(), [[1, 2]])
        self.assertTrue(any(issubclass(item.category, pymatrix.PyMatrixDTypeWarning) for item in w))

    def test_out_of_range_integer_overflows(self):
        with self.assertRaises(OverflowError):
            pymatrix.from_array(1, 1, [2**31], dtype="int32")

    def test_values_are_copied(self):
        values = [1, 2, 3, 4]
        m = pymatrix.from_array(2, 2, values)
        values[0] = 100
        self.assertEqual(m.at(0, 0), 1)

    def test_round_trip_through_rows(self):
        m = pymatrix.from_array(2, 2, [1.0, 2.0, 3.0, 4.0])
        again = pymatrix.from_array(2, 2, [v for row in m.tolist() for v in row])
        self.assertTrue(pymatrix.is_equal(m, again))


class TestMatrixFromRows(unittest.TestCase):
    def test_nested_rows(self):
        m = pymatrix.matrix([[1, 2], [3, 4], [5, 6]])
        self.assertEqual(m.shape, (3, 2))
        self.assertEqual(m[2, 1], 6)

    def test_ragged_rows_rejected(self):
        with self.assertRaises(ValueError):
            pymatrix.matrix([[1, 2], [3]])

    def test_numpy_input_keeps_dtype(self):
        m = pymatrix.matrix(np.arange(6, dtype=np.float32).reshape(2, 3))
        self.assertEqual(m.dtype, "float32")
        self.assertEqual(m.at(1, 2), 5.0)


class TestElementAccess(unittest.TestCase):
    def setUp(self):
        self.m = pymatrix.from_array(2, 3, [1, 2, 3, 4, 5, 6])

    def test_at_bound_is_out_of_range(self):
        with self.assertRaises(pymatrix.IndexOutOfRangeError):
            self.m.at(2, 0)
        with self.assertRaises(pymatrix.IndexOutOfRangeError):
            self.m.at(0, 3)
        with self.assertRaises(IndexError):
            self.m.at(-1, 0)

    def test_set_and_get(self):
        self.m.set(1, 2, 60)
        self.assertEqual(self.m.get(1, 2), 60)
        self.m[0, 0] = 10
        self.assertEqual(self.m[0, 0], 10)

    def test_set_out_of_range(self):
        with self.assertRaises(pymatrix.IndexOutOfRangeError):
            self.m.set(0, 3, 1)

    def test_select_row_and_column(self):
        self.assertEqual(self.m.select_row(1), [4, 5, 6])
        self.assertEqual(self.m.select_column(1), [2, 5])
        with self.assertRaises(pymatrix.IndexOutOfRangeError):
            self.m.select_row(2)
        with self.assertRaises(pymatrix.IndexOutOfRangeError):
            self.m.select_column(3)

    def test_selected_row_does_not_alias(self):
        row = self.m.select_row(0)
        row[0] = 99
        self.assertEqual(self.m.at(0, 0), 1)

    def test_to_numpy_is_a_copy(self):
        arr = self.m.to_numpy()
        self.assertEqual(arr.shape, (2, 3))
        arr[0, 0] = 99
        self.assertEqual(self.m.at(0, 0), 1)

    def test_fill(self):
        self.m.fill(7)
        self.assertEqual(self.m.tolist(), [[7, 7, 7], [7, 7, 7]])


class TestCopy(unittest.TestCase):
    def test_copy_is_deep(self):
        m = pymatrix.from_array(2, 2, [1, 2, 3, 4])
        c = pymatrix.copy(m)
        self.assertTrue(pymatrix.is_equal(m, c))
        c.set(0, 0, 50)
        self.assertEqual(m.at(0, 0), 1)
        self.assertFalse(pymatrix.is_equal(m, c))

    def test_copy_rejects_non_matrix(self):
        with self.assertRaises(TypeError):
            pymatrix.copy([[1, 2]])

    def test_matrix_is_unhashable(self):
        with self.assertRaises(TypeError):
            hash(pymatrix.create(1, 1))


if __name__ == "__main__":
    unittest.main()
