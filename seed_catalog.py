"""
seed_catalog.py — Starter plant catalogue and companion planting table.

Zone 10a (South Coast) planting windows, loaded by database.seed_catalog()
with INSERT OR IGNORE so user edits survive restarts.

Plants: (name, variety, category, days_to_maturity, spacing_inches,
         sun_requirement, water_needs, frost_tolerant)
Windows: (name, variety, window_type, start_month, end_month)
Companions: (plant_name_a, plant_name_b, relationship, notes)
"""

PLANTS = [
    ('Tomato', 'Cherokee Purple', 'vegetable', 80, 24, 'full', 'high', 0),
    ('Tomato', 'Sun Gold', 'vegetable', 65, 24, 'full', 'high', 0),
    ('Tomato', 'Roma', 'vegetable', 75, 24, 'full', 'high', 0),
    ('Pepper', 'California Wonder', 'vegetable', 75, 18, 'full', 'medium', 0),
    ('Pepper', 'Jalapeño', 'vegetable', 70, 18, 'full', 'medium', 0),
    ('Zucchini', 'Black Beauty', 'vegetable', 50, 36, 'full', 'high', 0),
    ('Cucumber', 'Marketmore', 'vegetable', 60, 12, 'full', 'high', 0),
    ('Beans', 'Blue Lake Bush', 'vegetable', 55, 4, 'full', 'medium', 0),
    ('Peas', 'Sugar Snap', 'vegetable', 60, 2, 'full', 'medium', 1),
    ('Corn', 'Golden Bantam', 'vegetable', 80, 12, 'full', 'high', 0),
    ('Carrot', 'Nantes', 'vegetable', 65, 2, 'full', 'medium', 1),
    ('Beet', 'Detroit Dark Red', 'vegetable', 55, 3, 'full', 'medium', 1),
    ('Lettuce', 'Buttercrunch', 'vegetable', 55, 8, 'partial', 'medium', 1),
    ('Spinach', 'Bloomsdale', 'vegetable', 45, 4, 'partial', 'medium', 1),
    ('Kale', 'Lacinato', 'vegetable', 60, 18, 'full', 'medium', 1),
    ('Broccoli', 'Calabrese', 'vegetable', 70, 18, 'full', 'medium', 1),
    ('Onion', 'Walla Walla', 'vegetable', 110, 4, 'full', 'low', 1),
    ('Garlic', 'California Softneck', 'vegetable', 240, 6, 'full', 'low', 1),
    ('Potato', 'Yukon Gold', 'vegetable', 90, 12, 'full', 'medium', 0),
    ('Basil', 'Genovese', 'herb', 60, 10, 'full', 'medium', 0),
    ('Parsley', 'Italian Flat Leaf', 'herb', 75, 8, 'partial', 'medium', 1),
    ('Dill', 'Bouquet', 'herb', 60, 10, 'full', 'low', 0),
    ('Fennel', 'Florence', 'herb', 80, 12, 'full', 'medium', 0),
    ('Rosemary', None, 'herb', 90, 24, 'full', 'low', 1),
    ('Chives', None, 'herb', 80, 6, 'full', 'medium', 1),
    ('Strawberry', 'Seascape', 'fruit', 90, 12, 'full', 'medium', 1),
    ('Marigold', 'French', 'flower', 50, 8, 'full', 'low', 0),
    ('Nasturtium', 'Jewel Mix', 'flower', 55, 10, 'full', 'low', 0),
    ('Sunflower', 'Mammoth', 'flower', 80, 18, 'full', 'low', 0),
    ('White Clover', None, 'cover_crop', 60, 1, 'full', 'low', 1),
    ('Buckwheat', None, 'cover_crop', 35, 1, 'full', 'low', 0),
]

WINDOWS = [
    ('Tomato', 'Cherokee Purple', 'indoor_start', 2, 4),
    ('Tomato', 'Cherokee Purple', 'transplant', 4, 7),
    ('Tomato', 'Sun Gold', 'indoor_start', 2, 4),
    ('Tomato', 'Sun Gold', 'transplant', 4, 7),
    ('Tomato', 'Roma', 'indoor_start', 2, 4),
    ('Tomato', 'Roma', 'transplant', 4, 7),
    ('Pepper', 'California Wonder', 'indoor_start', 1, 3),
    ('Pepper', 'California Wonder', 'transplant', 4, 5),
    ('Pepper', 'Jalapeño', 'indoor_start', 1, 3),
    ('Pepper', 'Jalapeño', 'transplant', 4, 5),
    ('Zucchini', 'Black Beauty', 'direct_sow', 4, 7),
    ('Cucumber', 'Marketmore', 'direct_sow', 4, 7),
    ('Beans', 'Blue Lake Bush', 'direct_sow', 4, 8),
    ('Peas', 'Sugar Snap', 'direct_sow', 10, 2),
    ('Corn', 'Golden Bantam', 'direct_sow', 4, 7),
    ('Carrot', 'Nantes', 'direct_sow', 9, 3),
    ('Beet', 'Detroit Dark Red', 'direct_sow', 9, 3),
    ('Lettuce', 'Buttercrunch', 'direct_sow', 9, 3),
    ('Lettuce', 'Buttercrunch', 'transplant', 10, 2),
    ('Spinach', 'Bloomsdale', 'direct_sow', 10, 2),
    ('Kale', 'Lacinato', 'indoor_start', 7, 9),
    ('Kale', 'Lacinato', 'transplant', 9, 11),
    ('Broccoli', 'Calabrese', 'indoor_start', 7, 9),
    ('Broccoli', 'Calabrese', 'transplant', 9, 11),
    ('Onion', 'Walla Walla', 'direct_sow', 10, 12),
    ('Garlic', 'California Softneck', 'direct_sow', 10, 12),
    ('Potato', 'Yukon Gold', 'direct_sow', 1, 3),
    ('Basil', 'Genovese', 'indoor_start', 3, 4),
    ('Basil', 'Genovese', 'transplant', 4, 7),
    ('Parsley', 'Italian Flat Leaf', 'direct_sow', 9, 4),
    ('Dill', 'Bouquet', 'direct_sow', 9, 4),
    ('Fennel', 'Florence', 'direct_sow', 9, 3),
    ('Rosemary', None, 'transplant', 3, 5),
    ('Chives', None, 'direct_sow', 2, 4),
    ('Strawberry', 'Seascape', 'transplant', 11, 1),
    ('Marigold', 'French', 'direct_sow', 3, 7),
    ('Nasturtium', 'Jewel Mix', 'direct_sow', 2, 5),
    ('Sunflower', 'Mammoth', 'direct_sow', 3, 7),
    ('White Clover', None, 'direct_sow', 9, 4),
    ('Buckwheat', None, 'direct_sow', 4, 8),
]

COMPANIONS = [
    ('Tomato', 'Basil', 'good', 'Basil repels pests and may improve tomato flavor'),
    ('Tomato', 'Carrot', 'good', 'Carrots loosen soil for tomato roots'),
    ('Tomato', 'Parsley', 'good', 'Parsley attracts beneficial insects'),
    ('Tomato', 'Marigold', 'good', 'Marigolds repel nematodes and whiteflies'),
    ('Tomato', 'Nasturtium', 'good', 'Nasturtiums trap aphids away from tomatoes'),
    ('Tomato', 'Onion', 'good', 'Onions deter pests'),
    ('Tomato', 'Garlic', 'good', 'Garlic repels spider mites'),
    ('Tomato', 'Lettuce', 'good', 'Lettuce benefits from tomato shade'),
    ('Tomato', 'Chives', 'good', 'Chives deter aphids'),
    ('Tomato', 'Broccoli', 'bad', 'Compete for nutrients'),
    ('Tomato', 'Kale', 'bad', 'Compete for nutrients'),
    ('Tomato', 'Corn', 'bad', 'Both attract same pests (tomato hornworm/corn earworm)'),
    ('Tomato', 'Fennel', 'bad', 'Fennel inhibits tomato growth'),
    ('Tomato', 'Dill', 'bad', 'Mature dill stunts tomato growth'),
    ('Tomato', 'Potato', 'bad', 'Both susceptible to blight, compete for nutrients'),
    ('Pepper', 'Basil', 'good', 'Basil repels aphids and spider mites'),
    ('Pepper', 'Onion', 'good', 'Onions deter pests'),
    ('Pepper', 'Spinach', 'good', 'Spinach provides ground cover'),
    ('Pepper', 'Fennel', 'bad', 'Fennel inhibits pepper growth'),
    ('Pepper', 'Beans', 'bad', 'Beans can spread diseases to peppers'),
    ('Beans', 'Corn', 'good', 'Classic Three Sisters - beans fix nitrogen, climb corn'),
    ('Beans', 'Zucchini', 'good', 'Three Sisters - squash shades soil'),
    ('Beans', 'Cucumber', 'good', 'Beans fix nitrogen for cucumbers'),
    ('Beans', 'Carrot', 'good', 'Beans add nitrogen to soil'),
    ('Beans', 'Rosemary', 'good', 'Rosemary deters bean beetles'),
    ('Beans', 'Onion', 'bad', 'Onions stunt bean growth'),
    ('Beans', 'Garlic', 'bad', 'Garlic stunts bean growth'),
    ('Beans', 'Chives', 'bad', 'Alliums stunt bean growth'),
    ('Beans', 'Fennel', 'bad', 'Fennel inhibits most plants'),
    ('Carrot', 'Onion', 'good', 'Onions repel carrot fly, carrots repel onion fly'),
    ('Carrot', 'Lettuce', 'good', 'Good space utilization'),
    ('Carrot', 'Rosemary', 'good', 'Rosemary repels carrot fly'),
    ('Carrot', 'Dill', 'bad', 'Dill cross-pollinates and stunts carrots'),
    ('Cucumber', 'Dill', 'good', 'Dill attracts beneficial insects'),
    ('Cucumber', 'Sunflower', 'good', 'Sunflowers provide support and shade'),
    ('Cucumber', 'Potato', 'bad', 'Cucumbers worsen blight susceptibility'),
    ('Lettuce', 'Chives', 'good', 'Chives deter aphids'),
    ('Lettuce', 'Strawberry', 'good', 'Good ground-level companions'),
    ('Broccoli', 'Dill', 'good', 'Dill attracts wasps that prey on cabbage worms'),
    ('Broccoli', 'Strawberry', 'bad', 'Compete for nutrients'),
    ('Kale', 'Beet', 'good', 'Good companions'),
    ('Onion', 'Beet', 'good', 'Good companions'),
    ('Onion', 'Peas', 'bad', 'Onions stunt pea growth'),
    ('Garlic', 'Peas', 'bad', 'Garlic stunts pea growth'),
    ('Basil', 'Parsley', 'good', 'Good herb garden companions'),
    ('Corn', 'Peas', 'good', 'Peas fix nitrogen'),
    ('Corn', 'Sunflower', 'good', 'Attract pollinators'),
    ('Potato', 'Sunflower', 'bad', 'Sunflowers inhibit potato growth'),
    ('Potato', 'Zucchini', 'bad', 'Compete for nutrients'),
    ('Fennel', 'Dill', 'bad', 'Cross-pollinate, reducing seed quality'),
]
