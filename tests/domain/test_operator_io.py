import unittest
from unittest import TestCase

from mlcore.domain._errors import InvalidParameterError
from mlcore.domain._operator_io import OperatorIO, ParamDef
from mlcore.domain.types._element_type import ElementType


class TestParamDef(TestCase):
    def test_has_and_get_param(self):
        p = ParamDef({"Units": 4}, Extra="note")
        self.assertTrue(p.has("Units"))
        self.assertFalse(p.has("Dim"))
        self.assertEqual(p.get_param("Units", int), 4)
        self.assertEqual(p.get_param("Extra", str), "note")

    def test_get_param_missing_key_raises(self):
        with self.assertRaises(KeyError):
            ParamDef().get_param("Units", int)

    def test_get_param_wrong_type_raises(self):
        p = ParamDef(Extra="note")
        with self.assertRaises(TypeError):
            p.get_param("Extra", int)

    def test_recognized_keys_are_validated(self):
        for bad in (0, -3, 2.5, "4", True):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidParameterError):
                    ParamDef(Units=bad)
        with self.assertRaises(InvalidParameterError):
            ParamDef(Dim=0)

    def test_unrecognized_keys_are_kept_untouched(self):
        p = ParamDef(Whatever=-1)
        self.assertEqual(p["Whatever"], -1)

    def test_rejects_empty_key(self):
        with self.assertRaises(InvalidParameterError):
            ParamDef({"": 1})

    def test_is_a_readonly_mapping(self):
        p = ParamDef(Units=2)
        self.assertEqual(dict(p), {"Units": 2})
        self.assertEqual(len(p), 1)
        with self.assertRaises(TypeError):
            p["Units"] = 3  # type: ignore[index]

    def test_equality_and_hash(self):
        self.assertEqual(ParamDef(Units=2), ParamDef({"Units": 2}))
        self.assertEqual(ParamDef(Units=2), {"Units": 2})
        self.assertEqual(hash(ParamDef(Units=2)), hash(ParamDef(Units=2)))
        self.assertNotEqual(ParamDef(Units=2), ParamDef(Units=3))


class TestOperatorIO(TestCase):
    def test_normalizes_fields(self):
        opio = OperatorIO("FC", "double", ["x", "w", "b"], ["y"], {"Units": 3})
        self.assertEqual(opio.inputs, ("x", "w", "b"))
        self.assertEqual(opio.outputs, ("y",))
        self.assertIsInstance(opio.param, ParamDef)
        self.assertEqual(opio.param.get_param("Units", int), 3)
        self.assertIs(opio.element_type, ElementType.DOUBLE)

    def test_defaults(self):
        opio = OperatorIO("Noop")
        self.assertEqual(opio.data_type, "float")
        self.assertEqual(opio.inputs, ())
        self.assertEqual(opio.outputs, ())
        self.assertEqual(len(opio.param), 0)

    def test_accepts_element_type_member(self):
        opio = OperatorIO("FC", ElementType.DOUBLE)  # type: ignore[arg-type]
        self.assertEqual(opio.data_type, "double")

    def test_unknown_data_type_raises(self):
        with self.assertRaises(ValueError):
            OperatorIO("FC", "int8")

    def test_single_string_for_names_raises(self):
        with self.assertRaises(TypeError):
            OperatorIO("FC", "float", "x", ["y"])  # type: ignore[arg-type]

    def test_empty_name_raises(self):
        with self.assertRaises(TypeError):
            OperatorIO("FC", "float", ["x", ""], ["y"])

    def test_invalid_param_raises(self):
        with self.assertRaises(InvalidParameterError):
            OperatorIO("FC", "float", ["x", "w", "b"], ["y"], {"Units": 0})

    def test_is_frozen_and_comparable(self):
        a = OperatorIO("FC", "float", ["x"], ["y"], {"Units": 1})
        b = OperatorIO("FC", "float", ("x",), ("y",), ParamDef(Units=1))
        self.assertEqual(a, b)
        with self.assertRaises(Exception):
            a.type = "OneHot"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
