from blockforge.conversion.messages import xml_escape
from blockforge.entities import BlockDescriptor, CategoryInfo


def category_xml(category: CategoryInfo) -> str:
    """toolbox <category> element listing the extension's palette entries"""
    palette = [
        block.xml
        for block in category.blocks
        if not (isinstance(block.info, BlockDescriptor) and block.info.hide_from_palette)
    ]

    attributes = [f'name="{xml_escape(category.name)}"', f'id="{xml_escape(category.id)}"']
    if category.show_status_button:
        attributes.append('showStatusButton="true"')
    attributes.append(f'colour="{category.color1}" secondaryColour="{category.color2}"')

    icon_uri = category.menu_icon_uri or category.block_icon_uri
    if icon_uri:
        attributes.append(f'iconURI="{xml_escape(icon_uri)}"')

    return f"<category {' '.join(attributes)}>{''.join(palette)}</category>"
