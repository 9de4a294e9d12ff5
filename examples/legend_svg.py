"""Example: define a composite type and render it to an SVG document."""

from devize import Computed, create_svg_root, define, render_viz, to_svg_string


def legend(props):
    rows = []
    for idx, (label, color) in enumerate(props['entries']):
        y = idx * props['row_height']
        rows.append({'type': 'rect', 'y': y, 'width': 10, 'height': 10, 'fill': color})
        rows.append({'type': 'text', 'x': 14, 'y': y + 9, 'text': label, 'font_size': 10})
    return {'type': 'group', 'x': props['x'], 'y': props['y'], 'children': rows}


define(
    {
        'name': 'legend',
        'properties': {
            'entries': {'type': 'array', 'required': True},
            'x': {'type': 'number', 'default': 0},
            'y': {'type': 'number', 'default': 0},
            'row_height': {'type': 'number', 'default': 14},
        },
        'implementation': legend,
    }
)

define(
    {
        'name': 'framedLegend',
        'extend': 'legend',
        'properties': {'padding': {'type': 'number', 'default': 4}},
        'implementation': lambda props, base: {
            'type': 'group',
            'children': [
                {
                    'type': 'rect',
                    'x': props['x'] - props['padding'],
                    'y': props['y'] - props['padding'],
                    'width': 80,
                    'height': len(props['entries']) * props['row_height'] + 2 * props['padding'],
                    'fill': 'none',
                    'stroke': '#888',
                },
                base,
            ],
        },
    }
)

if __name__ == '__main__':
    svg = create_svg_root(200, 100)
    render_viz(
        {
            'type': 'framedLegend',
            'x': 10,
            'y': 10,
            'entries': [('sales', 'steelblue'), ('costs', 'tomato')],
            'row_height': Computed(lambda props: 16 if len(props['entries']) < 5 else 12),
        },
        svg,
    )
    print(to_svg_string(svg))
