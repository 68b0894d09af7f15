"""Domain logic: prompt building, cost scaling, the storage pipeline and the canvas graph."""
