from dish_audit.ingredients import parse_ingredients


def test_list_is_returned_unchanged():
    ingredients = ["Paneer", "Butter", "Tomato", "Cream", "Cashew", "Kasuri Methi"]
    assert parse_ingredients(ingredients) == ingredients


def test_list_elements_are_stringified():
    assert parse_ingredients(["Rice", 2, 3.5]) == ["Rice", "2", "3.5"]


def test_json_array_with_single_quotes():
    assert parse_ingredients("['urad dal', 'butter', 'cream']") == ["urad dal", "butter", "cream"]


def test_json_array_is_not_capped():
    raw = '["a", "b", "c", "d", "e", "f", "g"]'
    assert parse_ingredients(raw) == ["a", "b", "c", "d", "e", "f", "g"]


def test_unquoted_bracket_list():
    assert parse_ingredients("[a, b, c]") == ["a", "b", "c"]


def test_malformed_json_falls_back_to_comma_split():
    assert parse_ingredients("[a, b") == ["[a", "b"]


def test_csv_is_trimmed_and_capped_at_five():
    raw = "onion , tomato,ginger, garlic,  chilli, cumin, salt"
    assert parse_ingredients(raw) == ["onion", "tomato", "ginger", "garlic", "chilli"]


def test_missing_field_gives_placeholder():
    assert parse_ingredients(None) == ["Spices", "Main Ingredient"]
    assert parse_ingredients(42) == ["Spices", "Main Ingredient"]
