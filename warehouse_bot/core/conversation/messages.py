"""
User-facing texts of the inventory conversation.
"""

from warehouse_bot.core.conversation.validators import ThermocupPayloadValidator


WELCOME_MESSAGE = """🏭 <b>Welcome to Warehouse Bot!</b> 🏭

Please choose an option from the menu:

📦 Get products
➕ Add new products
✏️ Update products"""


HELP_MESSAGE = """🤖 <b>How to use the bot:</b>

<b>Look up products:</b>
• «All products» — full list, page by page
• «Products by ID» — one product with its attributes
• «Thermocups by ID» — thermal mug details
• «Search by filter» — list filtered by key=value pairs

<b>Change records:</b>
• «Add new Thermal mug» — one line with all fields
• «Update thermal mug by ID» — replace a mug's fields
• «Update quantity of reserved product» / «Update product quantity in stock» — step by step

<b>Commands:</b>
/start — main menu
/cancel — abort the current input
/help — this help"""


PRODUCTS_MENU = """📦 <b>Get Products Menu:</b>

• All products
• Products by ID
• Thermocups by ID
• Search by filter"""


ADD_PRODUCTS_MENU = """➕ <b>Add New Products:</b>

• Add new Thermal mug"""


UPDATE_PRODUCTS_MENU = """✏️ <b>Update Products:</b>

• Update thermal mug by ID
• Update quantity of reserved product
• Update product quantity in stock"""


UNKNOWN_COMMAND = (
    "Unknown command. Please use the menu buttons or type /start to see available options."
)
GENERIC_ERROR = "❌ An error occurred while processing your request. Please try again."
UPSTREAM_ERROR = "❌ The warehouse service is unavailable or rejected the request. Please try again later."
SESSION_EXPIRED = "⌛ Your session has expired. Please start the operation again."
NO_LISTING = "There is no product list to page through. Choose «All products» first."
NO_PRODUCTS = "No products found."
CANCELLED = "❌ Operation cancelled."
NOTHING_TO_CANCEL = "Nothing to cancel."
FIRST_PAGE = "You are already on the first page."
LAST_PAGE = "You are already on the last page."

ASK_PRODUCT_ID = "Please enter the product ID:"
ASK_THERMOCUP_ID = "Please enter the thermocup ID:"
ASK_FILTER = (
    "Please enter filters as key=value pairs separated by '|':\n"
    "Example: category_id=1|is_active=true"
)
ASK_THERMOCUP_CREATE = (
    "Please enter thermocup data in the following format:\n\n"
    f"{ThermocupPayloadValidator.CREATE_FORMAT}\n\n"
    "Example:\n"
    "Premium Thermo|1|29.99|TH-500-BL|true|/photos/thermo1.jpg|500|Blue|ThermoBrand|PremiumX|true|Stainless Steel"
)
ASK_THERMOCUP_UPDATE = (
    "Please enter thermocup ID and update data in format:\n\n"
    f"{ThermocupPayloadValidator.UPDATE_FORMAT}\n\n"
    "Example:\n"
    "123|New Name|1|29.99|SKU123|true|/photos/1.jpg|500|Red|BrandX|ModelY|true|Stainless Steel"
)

ASK_STOCK_PRODUCT_ID = "📦 <b>Stock update</b> (step 1 of 3)\n\nPlease enter the product ID:"
ASK_STOCK_WAREHOUSE_ID = "📦 <b>Stock update</b> (step 2 of 3)\n\nProduct: {product}\n\nPlease enter the warehouse ID:"
ASK_STOCK_QUANTITY = (
    "📦 <b>Stock update</b> (step 3 of 3)\n\n"
    "Product ID: {product_id}, warehouse ID: {warehouse_id}\n\n"
    "Please enter the quantity change (positive to add, negative to subtract):"
)
ASK_RESERVED_PRODUCT_ID = "📌 <b>Reserved quantity update</b> (step 1 of 2)\n\nPlease enter the product ID:"
ASK_RESERVED_QUANTITY = (
    "📌 <b>Reserved quantity update</b> (step 2 of 2)\n\n"
    "Product: {product}\n\n"
    "Please enter the quantity change (positive to reserve, negative to release):"
)

PRODUCT_NOT_FOUND = "Product not found!"
THERMOCUP_NOT_FOUND = "Thermocup not found!"
PRODUCT_NOT_FOUND_RETRY = "Product {product_id} not found. Please enter an existing product ID:"
TRY_AGAIN = "{error}\n\nPlease try again:"

THERMOCUP_CREATED = "✅ Thermocup created successfully with ID: {product_id}"
THERMOCUP_ATTRIBUTES_FAILED = (
    "⚠️ Product {product_id} was created, but its thermocup attributes could not be saved."
)
THERMOCUP_UPDATED = "✅ Thermocup {product_id} updated successfully!"
STOCK_UPDATED = (
    "✅ Stock quantity updated successfully!\n"
    "Product ID: {product_id}, warehouse ID: {warehouse_id}, change: {quantity_change:+d}"
)
RESERVED_UPDATED = (
    "✅ Reserved quantity updated successfully!\n"
    "Product ID: {product_id}, change: {quantity_change:+d}"
)
