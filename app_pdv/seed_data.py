# ==============================================================================
# DATOS DE EJEMPLO - Usuarios, catálogo y movimientos iniciales
# ==============================================================================
# Se cargan al crear la app si PDV_SEED_DATA está activo.
# Todo pasa por los servicios: las contraseñas quedan hasheadas y las
# ventas con su total recalculado a partir de los items.
# ==============================================================================

import logging

from app_pdv.models import CartItem, PaymentMethod
from app_pdv.models.money import to_decimal

logger = logging.getLogger(__name__)

_IMG = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=500&h=300"

USERS = [
    {'username': 'admin', 'password': 'password', 'name': 'Administrador', 'isAdmin': True},
    {'username': 'vendedor', 'password': '123456', 'name': 'João Vendedor', 'isAdmin': False},
]

CATEGORIES = [
    ('Bebidas', 'local_bar'),
    ('Hortifruti', 'eco'),
    ('Limpeza', 'cleaning_services'),
    ('Alimentos', 'restaurant'),
    ('Diversos', 'category'),
    ('Padaria', 'bakery_dining'),
]

# (categoría, nombre, descripción, precio, id de imagen)
PRODUCTS = [
    ('Bebidas', 'Água Mineral 500ml', 'Água mineral sem gás 500ml', '2.50', '1616118132534-381148898bb4'),
    ('Bebidas', 'Refrigerante Cola 350ml', 'Refrigerante sabor cola em lata', '4.00', '1622483767028-3f66f32aef97'),
    ('Bebidas', 'Suco de Laranja 1L', 'Suco de laranja natural 1 litro', '8.90', '1600271886742-f049cd451bba'),
    ('Bebidas', 'Energético 250ml', 'Bebida energética em lata', '7.50', '1622543925917-763c34d1a86e'),
    ('Bebidas', 'Cerveja Lager 350ml', 'Cerveja pilsen em lata', '3.99', '1566633806327-68e152aaf26d'),
    ('Bebidas', 'Vinho Tinto 750ml', 'Vinho tinto seco nacional', '29.90', '1553361371-9513f3251822'),

    ('Hortifruti', 'Maçã Fuji kg', 'Maçã Fuji fresca por quilo', '9.99', '1560806887-1e4cd0b6cbd6'),
    ('Hortifruti', 'Banana Prata kg', 'Banana Prata por quilo', '5.99', '1528825871115-3581a5387919'),
    ('Hortifruti', 'Tomate kg', 'Tomate fresco por quilo', '8.50', '1607305387299-a3d9611cd469'),
    ('Hortifruti', 'Alface Crespa Unidade', 'Alface crespa fresca', '3.49', '1621458452298-0ada22833210'),
    ('Hortifruti', 'Cenoura kg', 'Cenoura fresca por quilo', '4.99', '1598170845058-32b9d6a5da37'),

    ('Limpeza', 'Detergente Líquido 500ml', 'Detergente líquido para louças', '3.50', '1585421514738-01798e348b17'),
    ('Limpeza', 'Sabão em Pó 1kg', 'Sabão em pó para lavagem de roupas', '12.90', '1610557892470-55d9e80c0bce'),
    ('Limpeza', 'Desinfetante 2L', 'Desinfetante para uso geral', '8.99', '1605713673658-098957694a88'),
    ('Limpeza', 'Esponja Multiuso 3 unid', 'Pacote com 3 esponjas para limpeza geral', '4.50', '1622560480654-d96214fdc887'),

    ('Alimentos', 'Arroz Integral 1kg', 'Arroz integral tipo 1', '7.99', '1586201375761-83865001e8ac'),
    ('Alimentos', 'Feijão Preto 1kg', 'Feijão preto tipo 1', '8.49', '1622623222183-53cb693fdf88'),
    ('Alimentos', 'Macarrão Espaguete 500g', 'Macarrão espaguete tradicional', '4.75', '1551462147-ff29053bfc14'),
    ('Alimentos', 'Molho de Tomate 340g', 'Molho de tomate tradicional', '3.99', '1608508644127-ba99d7732fee'),
    ('Alimentos', 'Azeite Extra Virgem 500ml', 'Azeite de oliva extra virgem importado', '29.90', '1565636291290-4810fe964a01'),

    ('Padaria', 'Pão Francês 1kg', 'Pão francês fresco do dia', '12.99', '1573497620053-ea5300f94f21'),
    ('Padaria', 'Bolo de Chocolate Fatia', 'Fatia de bolo de chocolate caseiro', '6.50', '1606890737304-57a1ca8a5b62'),
    ('Padaria', 'Pão de Queijo 6 unid', 'Pão de queijo mineiro tradicional', '8.75', '1598143379732-a5dc436c4fdf'),
    ('Padaria', 'Sonho Recheado', 'Sonho recheado com creme', '5.99', '1586985288123-2495f577c250'),
    ('Padaria', 'Croissant', 'Croissant francês folhado', '6.49', '1623334044303-241021148842'),

    ('Diversos', 'Pilhas AA (4 unidades)', 'Pacote com 4 pilhas alcalinas AA', '12.90', '1626420925443-c6845a6a3814'),
    ('Diversos', 'Papel Alumínio 30m', 'Rolo de papel alumínio 30 metros', '7.99', '1620039188898-f733209ea8e7'),
    ('Diversos', 'Filtro de Café 103 (30 unid)', 'Caixa com 30 filtros de papel para café', '5.49', '1572119951839-327c386b56ad'),
    ('Diversos', 'Carregador Portátil USB', 'Carregador de celular com 2 entradas USB', '24.90', '1583863788534-eebd9306f204'),
    ('Diversos', 'Caderno Universitário 100 fls', 'Caderno com espiral e capa dura', '19.90', '1582078892174-dc3e9214e122'),
    ('Diversos', 'Guarda-Chuva Dobrável', 'Guarda-chuva compacto e automático', '29.99', '1518627675136-e9a92cf987f3'),
]

# (productId, nombre, precio, cantidad, id de imagen) tal como quedaron en el recibo
SALES = [
    {
        'method': PaymentMethod.CASH,
        'amount_received': '20.00',
        'items': [
            (1, 'Água Mineral 500ml', '2.50', '2', '1616118132534-381148898bb4'),
            (2, 'Refrigerante Cola 350ml', '4.00', '1', '1622483767028-3f66f32aef97'),
        ],
    },
    {
        'method': PaymentMethod.CREDIT,
        'items': [
            (3, 'Suco de Laranja 1L', '8.90', '1', '1600271886742-f049cd451bba'),
            (8, 'Arroz Integral 1kg', '7.99', '1', '1586201375761-83865001e8ac'),
            (5, 'Maçã Fuji kg', '9.99', '0.66', '1560806887-1e4cd0b6cbd6'),
        ],
    },
    {
        'method': PaymentMethod.PIX,
        'items': [
            (9, 'Feijão Preto 1kg', '8.49', '2', '1622623222183-53cb693fdf88'),
            (10, 'Pilhas AA (4 unidades)', '12.90', '2', '1626420925443-c6845a6a3814'),
        ],
    },
]


def seed(container) -> None:
    """
    Carga los datos de ejemplo en un contenedor vacío.

    Args:
        container: AppContainer recién creado
    """
    users = {}
    for data in USERS:
        user = container.user_service.register_user(data)
        users[user.username] = user
    operator_id = users['vendedor'].id

    categories = {}
    for name, icon in CATEGORIES:
        category = container.catalog_service.create_category({'name': name, 'icon': icon})
        categories[name] = category.id

    for category, name, description, price, image in PRODUCTS:
        container.catalog_service.create_product({
            'name': name,
            'description': description,
            'price': price,
            'imageUrl': _IMG.format(image),
            'categoryId': categories[category],
            'inStock': True,
        })

    container.cash_service.record_transaction({
        'amount': '100.00',
        'reason': 'opening',
        'notes': 'Abertura de caixa inicial',
        'operatorId': operator_id,
    })

    for sale in SALES:
        items = [
            CartItem(
                product_id=product_id,
                name=name,
                price=to_decimal(price),
                quantity=to_decimal(quantity),
                image_url=_IMG.format(image),
            )
            for product_id, name, price, quantity, image in sale['items']
        ]
        container.sales_service.create_sale(
            items,
            sale['method'],
            operator_id,
            amount_received=to_decimal(sale.get('amount_received')),
        )

    logger.info(
        'Datos de ejemplo cargados: %d usuarios, %d productos, %d ventas',
        len(users), len(PRODUCTS), len(SALES)
    )
