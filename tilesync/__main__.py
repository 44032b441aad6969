from tilesync.main import serve

serve()
