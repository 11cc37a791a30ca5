"""
UIフォント管理モジュール。

レジスタ表示や逆アセンブル表示で使用する等幅フォントを、プラットフォームごとに選択します。
"""
from functools import lru_cache

from PySide6.QtGui import QFont, QFontDatabase

PREFERRED_FAMILIES = ("Consolas", "Menlo", "DejaVu Sans Mono", "Courier New")

# @intent:responsibility 利用可能な等幅フォントファミリー名を返します。見つからなければQtのシステム既定を使います。
@lru_cache(maxsize=1)
def get_monospace_font_family() -> str:
    available = set(QFontDatabase.families())
    for family in PREFERRED_FAMILIES:
        if family in available:
            return family
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    font = QFont(get_monospace_font_family(), size)
    font.setStyleHint(QFont.Monospace)
    return font
