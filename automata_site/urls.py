from django.urls import include, path

urlpatterns = [
    path('', include('automata_engine.urls')),
]
