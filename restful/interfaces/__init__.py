"""層間インターフェース定義。

server/ と client/ はこのパッケージの抽象クラスと codec/・config・log
にのみ依存する。restful/store/ や rwstore の実装に直接依存してはならない。
Store の組み立ては restful/dependencies.py が行い、server/main.py だけがそれを使う。
"""
