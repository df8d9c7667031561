"""Sample records from the Prayagraj (Transport Nagar) GIS survey."""
from models.simulation_models import Route, Truck, Citizen

SAMPLE_CITIZENS = [
    Citizen('c1', 'Bharat Singh', '54K/5L/3R, Umarpur Neewa', 'Transport Nagar', 'Kandhai Pur', 25.45952723, 81.77627969),
    Citizen('c2', 'Tirath Nath Pal', '87L/18/1, Bhola Ka Purwa', 'Sulemsarai', 'Ramman Ka Purwa', 25.4514449, 81.7898056),
    Citizen('c3', 'Daya Shankar Rai', '46/21A-1/9, Ramman Ka Purwa', 'Sulemsarai', 'Tar Bhgh', 25.45075436, 81.79074123),
    Citizen('c4', 'Pyare Lal', '86L/12A, Tar Bhgh', 'Sulemsarai', 'Ramman Ka Purwa', 25.45292441, 81.79107079),
    Citizen('c5', 'Chandra Kant Singh', '101M/16R/1J, Bhola Ka Purwa', 'Sulemsarai', 'Bhola Ka Purwa', 25.45693571, 81.79028777),
    Citizen('c6', 'Kanti Singh', '82E/5, Umarpur Neewa', 'Sulemsarai', 'Ramman Ka Purwa', 25.45463829, 81.79156568),
    Citizen('c7', 'Anita Devi', '365/2J/1, Sulem Sarai Awas Yojna', 'Jayantipur', 'Sulem Sarai', 25.44623322, 81.78820543),
    Citizen('c8', 'Shashi Lata Srivastava', '144L/7C/5Z, Ramman Ka Purwa', 'Sulemsarai', 'Ramman Ka Purwa', 25.45435235, 81.79195165),
]

SAMPLE_ROUTES = [
    Route(
        route_id='route1',
        name='Transport Nagar Route A',
        total_distance_km=3.2,
        wards_covered=['Transport Nagar', 'Sulemsarai'],
        coordinates=[
            (81.775, 25.460),  # depot
            (81.777, 25.459),
            (81.780, 25.458),
            (81.785, 25.456),
            (81.788, 25.455),
            (81.790, 25.454),
            (81.791, 25.453),
            (81.791, 25.451),
            (81.790, 25.449),
            (81.788, 25.447),
            (81.788, 25.446),
        ]
    ),
    Route(
        route_id='route2',
        name='Sulemsarai Route B',
        total_distance_km=2.5,
        wards_covered=['Sulemsarai'],
        coordinates=[
            (81.792, 25.455),
            (81.791, 25.454),
            (81.790, 25.453),
            (81.789, 25.452),
            (81.790, 25.451),
            (81.791, 25.450),
            (81.792, 25.449),
        ]
    ),
]

SAMPLE_TRUCKS = [
    Truck('truck1', 'TN-01 (Eicher)', 'route1', 15.0, home_position=(81.775, 25.460)),
    Truck('truck2', 'TN-02 (Tata)', 'route2', 12.0, home_position=(81.792, 25.455)),
]
