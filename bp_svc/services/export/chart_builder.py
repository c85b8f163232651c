"""
reportlab chart construction for the PDF report.

Builds a line chart of systolic and diastolic values over the export
series. The y-axis spans [min(diastolic) - 5, max(systolic) + 5]; x-axis
labels are placed on a sparse subset of points (every ceil(n/5)-th point
plus the last one) so dates do not crowd each other on long series.
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

from reportlab.graphics.charts.legends import Legend
from reportlab.graphics.charts.lineplots import LinePlot
from reportlab.graphics.shapes import Drawing
from reportlab.graphics.widgets.markers import makeMarker
from reportlab.lib.colors import HexColor

from bp_svc.services.trend_series import SeriesPoint

logger = logging.getLogger(__name__)


SYSTOLIC_COLOR = HexColor("#263238")
DIASTOLIC_COLOR = HexColor("#607D8B")
GRID_COLOR = HexColor("#E0E0E0")

AXIS_PADDING = 5
LABEL_TARGET = 5


def label_indices(count: int) -> List[int]:
    """
    Pick the point indices that get an x-axis label.

    Every ceil(count/5)-th index starting at 0, plus the last index.

    Example:
        >>> label_indices(12)
        [0, 3, 6, 9, 11]
    """
    if count <= 0:
        return []
    step = math.ceil(count / LABEL_TARGET)
    indices = list(range(0, count, step))
    if indices[-1] != count - 1:
        indices.append(count - 1)
    return indices


def value_range(points: Sequence[SeriesPoint]) -> Tuple[int, int]:
    """
    Get the y-axis range: [min(diastolic) - 5, max(systolic) + 5].

    Raises:
        ValueError: If points is empty
    """
    if not points:
        raise ValueError("Cannot compute a value range without points")
    low = min(p.diastolic for p in points) - AXIS_PADDING
    high = max(p.systolic for p in points) + AXIS_PADDING
    if high <= low:
        # Only reachable with diastolic values above systolic ones
        high = low + 2 * AXIS_PADDING
    return low, high


def build_chart(
    points: Sequence[SeriesPoint],
    width: float,
    height: float,
    font_name: str = 'Helvetica',
) -> Drawing:
    """
    Build the systolic/diastolic line chart.

    Args:
        points: Series points, oldest first
        width: Drawing width in points
        height: Drawing height in points
        font_name: Registered font for axis labels and legend

    Returns:
        reportlab Drawing ready to be placed on a canvas
    """
    y_min, y_max = value_range(points)
    indices = label_indices(len(points))
    labels: Dict[int, str] = {i: points[i].timestamp_label for i in indices}

    drawing = Drawing(width, height)

    plot = LinePlot()
    plot.x = 36
    plot.y = 42
    plot.width = width - 48
    plot.height = height - 70
    plot.data = [
        [(i, p.systolic) for i, p in enumerate(points)],
        [(i, p.diastolic) for i, p in enumerate(points)],
    ]
    plot.joinedLines = 1

    for line_index, color in enumerate((SYSTOLIC_COLOR, DIASTOLIC_COLOR)):
        plot.lines[line_index].strokeColor = color
        plot.lines[line_index].strokeWidth = 1.5
        plot.lines[line_index].symbol = makeMarker('FilledCircle', size=3)
    plot.lines[1].strokeDashArray = [3, 2]

    plot.xValueAxis.valueMin = 0
    plot.xValueAxis.valueMax = max(len(points) - 1, 1)
    plot.xValueAxis.valueSteps = indices
    plot.xValueAxis.labelTextFormat = lambda value: labels.get(int(round(value)), '')
    plot.xValueAxis.labels.fontName = font_name
    plot.xValueAxis.labels.fontSize = 7
    plot.xValueAxis.labels.angle = 30
    plot.xValueAxis.labels.boxAnchor = 'ne'

    plot.yValueAxis.valueMin = y_min
    plot.yValueAxis.valueMax = y_max
    plot.yValueAxis.labels.fontName = font_name
    plot.yValueAxis.labels.fontSize = 7
    plot.yValueAxis.visibleGrid = 1
    plot.yValueAxis.gridStrokeColor = GRID_COLOR
    plot.yValueAxis.gridStrokeWidth = 0.5

    drawing.add(plot)

    legend = Legend()
    legend.x = width - 150
    legend.y = height - 6
    legend.alignment = 'right'
    legend.columnMaximum = 1
    legend.dx = 8
    legend.dy = 8
    legend.deltax = 70
    legend.fontName = font_name
    legend.fontSize = 8
    legend.colorNamePairs = [
        (SYSTOLIC_COLOR, 'Systolic'),
        (DIASTOLIC_COLOR, 'Diastolic'),
    ]
    drawing.add(legend)

    logger.debug(
        "Report chart built",
        extra={'points': len(points), 'y_range': [y_min, y_max], 'labels': len(indices)}
    )
    return drawing
